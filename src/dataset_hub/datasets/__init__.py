"""Datasets domain: schemas, repositories, upload validation and persona parsing."""

from .persona import PersonaPair, parse_persona
from .repository import DatasetRepository, TeammateRepository
from .service import UploadResult, parse_dataset_json, seed_teammates, upload_datasets

__all__ = [
    "PersonaPair",
    "parse_persona",
    "DatasetRepository",
    "TeammateRepository",
    "UploadResult",
    "parse_dataset_json",
    "seed_teammates",
    "upload_datasets",
]
