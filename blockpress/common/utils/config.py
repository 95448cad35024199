"""
Load configuration from `config.toml`.
"""

from pathlib import Path
from pydantic import BaseModel, field_validator

THIS_DIR = Path(__file__).parent.resolve()

CONFIG_FILE_PATH = THIS_DIR / "config.toml"


class Config(BaseModel):
    max_depth: int
    context_length: int
    code_languages: list[str]
    default_callout_icon: str
    detect_callouts: bool
    callout_keywords: list[str]
    document_title: str
    blog_index_url: str
    collection_post_url: str

    @field_validator("max_depth", "context_length", mode="before")
    def at_least_one(cls, value: int) -> int:
        if int(value) < 1:
            raise ValueError("Value must be at least 1.")
        return int(value)

    @field_validator("code_languages", "callout_keywords", mode="before")
    def lowercase_entries(cls, v: list[str]) -> list[str]:
        return [str(item).strip().lower() for item in v]

    @field_validator("collection_post_url", mode="before")
    def has_slug_placeholder(cls, value: str) -> str:
        if "{slug}" not in value:
            raise ValueError("collection_post_url must contain '{slug}'.")
        return value


def load_config(path: Path = CONFIG_FILE_PATH) -> Config:
    import tomli

    with open(path, "rb") as f:
        data = tomli.load(f)

    config_data = {k.lower(): v for k, v in data.items()}
    return Config(**config_data)


config = load_config()


def set_config(new_config: Config) -> None:
    global config
    config = new_config


def get_config() -> Config:
    """Return the active configuration (respects `set_config`)."""
    return config


__all__ = ["config", "set_config", "get_config", "load_config", "Config"]  # allow users to set a new config if needed

if __name__ == "__main__":
    print(config)
