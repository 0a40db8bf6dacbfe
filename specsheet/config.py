import json
import os
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from runner.errors import ConfigError

CONFIG_CANDIDATES = ("specsheet.config.json", "mockup-config.json", "config.json")


class _ConfigModel(BaseModel):
    model_config = ConfigDict(extra='ignore', alias_generator=to_camel, populate_by_name=True)


class Viewport(_ConfigModel):
    width: int = 1440
    height: int = 900


class ActionConfig(_ConfigModel):
    """One scripted interaction run before the page is captured."""
    type: str
    selector: Optional[str] = None
    value: Optional[Any] = None
    x: Optional[int] = None
    y: Optional[int] = None
    duration: Optional[int] = None
    timeout: Optional[int] = None
    code: Optional[str] = None
    wait_after: Optional[int] = None
    required: bool = False
    description: Optional[str] = None

    @property
    def display_description(self) -> str:
        if self.description:
            return self.description.strip()
        if self.value not in (None, ""):
            return f"{self.type} ({self.value})"
        return self.type


class PageConfig(_ConfigModel):
    name: str
    path: str = "/"
    category: Optional[str] = None
    description: Optional[str] = None
    title: Optional[str] = None
    viewport: Optional[Viewport] = None
    wait_strategy: str = "basic"
    actions: List[ActionConfig] = Field(default_factory=list)


class ScreenMeta(_ConfigModel):
    filename: str
    title: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None


class SpecSheetOptions(_ConfigModel):
    output_dir: Optional[str] = None
    screenshot_dir: Optional[str] = None
    file_name: Optional[str] = None


class ProjectConfig(_ConfigModel):
    project_name: str
    base_url: str
    output_dir: str = "."
    viewport: Optional[Viewport] = None
    pages: List[PageConfig]
    screens: List[ScreenMeta] = Field(default_factory=list)
    spec_sheet: SpecSheetOptions = Field(default_factory=SpecSheetOptions)

    @field_validator('pages')
    @classmethod
    def _pages_not_empty(cls, pages: List[PageConfig]) -> List[PageConfig]:
        if not pages:
            raise ValueError("pages must be a non-empty list")
        return pages

    def screen_meta(self, page_name: str) -> Optional[ScreenMeta]:
        for screen in self.screens:
            if screen.filename == page_name:
                return screen
        return None

    @property
    def spec_output_dir(self) -> str:
        return self.spec_sheet.output_dir or os.path.join(self.output_dir, "specifications")

    @property
    def screenshot_dir(self) -> str:
        return self.spec_sheet.screenshot_dir or os.path.join(self.spec_output_dir, "screens")


def find_config_file(cwd: Optional[str] = None) -> Optional[str]:
    cwd = cwd or os.getcwd()
    for candidate in CONFIG_CANDIDATES:
        path = os.path.join(cwd, candidate)
        if os.path.exists(path):
            return path
    return None


def _resolve(path: Optional[str], base_dir: str) -> Optional[str]:
    if not path or os.path.isabs(path):
        return path
    return os.path.normpath(os.path.join(base_dir, path))


def load_project_config(path: Optional[str] = None) -> ProjectConfig:
    """
    Load and validate a project configuration file.

    Without a path the current directory is searched for CONFIG_CANDIDATES.
    Relative output locations are resolved against the config file's directory.
    """
    config_path = path or find_config_file()
    if not config_path:
        raise ConfigError(
            "No configuration file found. Create one of "
            f"{', '.join(CONFIG_CANDIDATES)} or pass a path explicitly."
        )
    if not os.path.exists(config_path):
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw: Dict[str, Any] = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in configuration file {config_path}: {e}")

    try:
        config = ProjectConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration {config_path}: {e}")

    base_dir = os.path.dirname(os.path.abspath(config_path))
    config.output_dir = _resolve(config.output_dir, base_dir)
    config.spec_sheet.output_dir = _resolve(config.spec_sheet.output_dir, base_dir)
    config.spec_sheet.screenshot_dir = _resolve(config.spec_sheet.screenshot_dir, base_dir)
    return config
