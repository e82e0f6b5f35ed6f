"""YAML decoding and encoding of devfile documents."""

import yaml
from pydantic import ValidationError

from devfile_parser.codes import ErrorCode
from devfile_parser.kernel.errors import DecodeError
from devfile_parser.kernel.model import DUPLICATE_ERROR_TYPE, Document


class YamlDocumentDecoder:
    """Decodes YAML (or JSON) devfile content into a Document."""

    def decode(self, content: bytes, api_version: str) -> Document:
        try:
            raw = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise DecodeError(e) from e
        if not isinstance(raw, dict):
            raise DecodeError("top-level value must be a mapping")

        # Normalize the version key so output always carries apiVersion
        raw = {k: v for k, v in raw.items() if k not in ("apiVersion", "schemaVersion")}
        raw["apiVersion"] = api_version
        try:
            return Document.model_validate(raw)
        except ValidationError as e:
            duplicate = any(err["type"] == DUPLICATE_ERROR_TYPE for err in e.errors())
            raise DecodeError(e, code=ErrorCode.DUPLICATE_ID if duplicate else None) from e


def dump_yaml(document: Document) -> str:
    """Render a document as devfile YAML, preserving field order."""
    return yaml.safe_dump(document.to_wire(), sort_keys=False, default_flow_style=False)
