from __future__ import annotations
import logging
from typing import Any, Dict
from querytypes.tasks.celery_app import celery_app
from querytypes.core.workflow import outcome_to_dict
from querytypes.schemas.config import ParsedConfig, TransformConfig
from querytypes.tasks.worker import ensure_worker, process_file

log = logging.getLogger(__name__)

@celery_app.task(name="process_file")
def process_file_task(path: str, transform: Dict[str, Any], config: Dict[str, Any]) -> Dict[str, Any]:
    transform_config = TransformConfig.model_validate(transform)
    ensure_worker(ParsedConfig.model_validate(config))
    log.info("Processing file", extra={"transform": transform_config.include, "file": path})
    return outcome_to_dict(process_file(path, transform_config))
