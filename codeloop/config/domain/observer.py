"""Observer port for the config domain — defines events in domain language."""

from typing import Protocol


class ConfigObserver(Protocol):
    def config_loaded(self, path: str, model: str, root_dir: str) -> None: ...

    def config_temperature_warning(self, temperature: float) -> None: ...
