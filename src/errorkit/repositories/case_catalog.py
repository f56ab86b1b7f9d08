"""Response code group definitions on disk.

Pure data access: list, load and save ``*RespCode.json`` group definitions.
No translation or HTTP concerns.
"""

from pathlib import Path

from errorkit.logging import get_logger
from errorkit.models import CodeGroup, ResponseCode
from errorkit.schemas.resp_code import CodeGroupDefinition

logger = get_logger(__name__)


class DirectoryCaseCatalog:
    """Group definitions stored as ``{directory}/{Name}{suffix}.json``."""

    def __init__(self, directory: Path | str, suffix: str = "RespCode") -> None:
        self.directory = Path(directory)
        self.suffix = suffix

    def type_name(self, name: str) -> str:
        """``"user"``, ``"User"`` and ``"UserRespCode"`` all map to ``"UserRespCode"``."""
        name = name.strip()
        if self.suffix and name.lower().endswith(self.suffix.lower()):
            name = name[: -len(self.suffix)]
        return name[:1].upper() + name[1:] + self.suffix

    def path_for(self, name: str) -> Path:
        return self.directory / f"{self.type_name(name)}.json"

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def list_groups(self) -> list[str]:
        """Sorted type names of every group definition in the directory."""
        if not self.directory.is_dir():
            return []
        pattern = f"*{self.suffix}.json"
        return sorted(path.stem for path in self.directory.rglob(pattern) if path.is_file())

    def load_group(self, name: str) -> CodeGroup:
        """Load one group. Raises FileNotFoundError or pydantic.ValidationError."""
        path = self.path_for(name)
        if not path.is_file():
            matches = list(self.directory.rglob(path.name)) if self.directory.is_dir() else []
            if not matches:
                raise FileNotFoundError(f"No response code group {self.type_name(name)} in {self.directory}")
            path = matches[0]
        definition = CodeGroupDefinition.model_validate_json(path.read_text(encoding="utf-8"))
        return definition.to_group()

    def list_cases(self, name: str) -> list[ResponseCode]:
        return list(self.load_group(name).cases)

    def save_group(self, definition: CodeGroupDefinition, *, force: bool = False) -> bool:
        """Write a group definition. Returns False if it exists and ``force`` is off."""
        path = self.path_for(definition.name)
        if path.exists() and not force:
            logger.warning("group_exists", path=str(path))
            return False
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(definition.model_dump_json(indent=4, exclude_none=True) + "\n", encoding="utf-8")
        logger.info("group_written", path=str(path), cases=len(definition.cases))
        return True
