from __future__ import annotations

import json
from typing import Any, Mapping

import structlog

from hieravault.config.settings import BackendConfig, FieldBehavior, FieldParse
from hieravault.host import LookupHost

logger = structlog.get_logger()


class FieldExtractor:
    """Turns a secret record into an answer.

    With ``default_field`` unset the whole record is returned. Otherwise the
    field's value is returned when ``default_field_behavior`` is 'ignore', or
    when it is 'only' and the field is the record's sole key; an 'only'
    record with other keys falls back to the whole record.
    """

    def __init__(self, config: BackendConfig, host: LookupHost):
        self.config = config
        self.host = host

    def extract(self, record: Mapping[Any, Any] | None, scope: Mapping[str, Any]) -> Any:
        if record is None:
            return None

        field = self.config.default_field
        if field and self._use_default_field(record, field):
            if field not in record:
                return None
            data = record[field]
            if self.config.default_field_parse == FieldParse.JSON:
                data = self._parse_json(data)
        else:
            data = {str(key): value for key, value in record.items()}

        return self.host.parse_answer(data, scope)

    def _use_default_field(self, record: Mapping[Any, Any], field: str) -> bool:
        if self.config.default_field_behavior == FieldBehavior.IGNORE:
            return True
        return field in record and len(record) == 1

    def _parse_json(self, value: Any) -> Any:
        if not isinstance(value, (str, bytes, bytearray)):
            return value
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            logger.debug("default_field_not_json", field=self.config.default_field)
            return value
