"""Query source that reads already-resolved query descriptors from disk."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

import yaml

from querytypes.core.errors import UpstreamResolutionError
from querytypes.generators.typegen.types import ParsedQuery, ProcessingMode, QueryTypes, parse_query_types

log = logging.getLogger(__name__)

MODE_BY_TRANSFORM = {"sql": ProcessingMode.SQL, "ts": ProcessingMode.TS}


class DescriptorSource:
    """
    Reads files holding resolved query shapes, for example::

        {"mode": "sql-file",
         "queries": [{"name": "GetUser", "returnTypes": [...], "paramMetadata": {...}},
                     {"name": "Broken", "error": {"message": "column x does not exist"}}]}

    JSON is tried first, then YAML. Lets any external resolver that can dump
    its results plug into generation without code.
    """

    def __init__(self, config=None):
        self.config = config
        self._descriptors: Dict[str, Dict[int, Dict[str, Any]]] = {}

    def _load_document(self, path: str, contents: str) -> Dict[str, Any]:
        try:
            document = json.loads(contents)
        except json.JSONDecodeError:
            try:
                document = yaml.safe_load(contents)
            except yaml.YAMLError as e:
                raise UpstreamResolutionError(f"Cannot read query descriptor {path}: {e}") from e
        if document is None:
            return {"queries": []}
        if not isinstance(document, dict) or not isinstance(document.get("queries", []), list):
            raise UpstreamResolutionError(f"Query descriptor {path} must hold a 'queries' list")
        return document

    def parse(self, path: str, contents: str, transform) -> List[ParsedQuery]:
        # a re-parse replaces whatever an earlier, failed run left behind
        self._descriptors.pop(path, None)
        document = self._load_document(path, contents)
        default_mode = MODE_BY_TRANSFORM[transform.mode].value
        try:
            mode = ProcessingMode(document.get("mode", default_mode))
        except ValueError:
            raise UpstreamResolutionError(f"Unknown mode '{document.get('mode')}' in {path}") from None

        entries: Dict[int, Dict[str, Any]] = {}
        queries = []
        for location, entry in enumerate(document.get("queries", [])):
            if not isinstance(entry, dict) or not entry.get("name"):
                raise UpstreamResolutionError(f"Query #{location} in {path} has no name")
            entries[location] = entry
            queries.append(ParsedQuery(
                mode=mode,
                name=entry["name"],
                file_path=path,
                location=location,
                text=entry.get("text", ""),
                placeholders=tuple(entry.get("placeholders", ())),
            ))
        if entries:
            self._descriptors[path] = entries
        log.debug("Parsed %d queries", len(queries), extra={"file": path})
        return queries

    def get_types(self, query: ParsedQuery) -> QueryTypes:
        entries = self._descriptors.get(query.file_path, {})
        entry = entries.pop(query.location, None)
        if not entries:
            self._descriptors.pop(query.file_path, None)
        if entry is None:
            raise UpstreamResolutionError(f"Query '{query.name}' was not parsed from {query.file_path}")

        try:
            error = entry.get("error")
            if error:
                message = error.get("message", error) if isinstance(error, dict) else error
                hint = error.get("hint") if isinstance(error, dict) else None
                detail = f"{message} (hint: {hint})" if hint else str(message)
                raise UpstreamResolutionError(f"Query '{query.name}' is invalid: {detail}")
            return parse_query_types(entry)
        except UpstreamResolutionError:
            # the whole file fails, so its remaining queries are never resolved
            self._descriptors.pop(query.file_path, None)
            raise

    def close(self) -> None:
        self._descriptors.clear()
