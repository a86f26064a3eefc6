"""FakeConfigObserver — records config events for assertion in tests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ConfigLoadedEvent:
    path: str
    model: str
    root_dir: str


class FakeConfigObserver:
    def __init__(self) -> None:
        self.loaded: list[ConfigLoadedEvent] = []
        self.temperature_warnings: list[float] = []

    def config_loaded(self, path: str, model: str, root_dir: str) -> None:
        self.loaded.append(ConfigLoadedEvent(path=path, model=model, root_dir=root_dir))

    def config_temperature_warning(self, temperature: float) -> None:
        self.temperature_warnings.append(temperature)
