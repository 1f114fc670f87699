from dataclasses import dataclass

from src.library.core.services import DbSessionService


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
