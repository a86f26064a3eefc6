"""StructlogConfigObserver — logs config loading events."""

import structlog


class StructlogConfigObserver:
    """Satisfies the ConfigObserver protocol structurally."""

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(self, path: str, model: str, root_dir: str) -> None:
        self._log.info("config.loaded", path=path, model=model, root_dir=root_dir)

    def config_temperature_warning(self, temperature: float) -> None:
        self._log.warning(
            "config.temperature_warning",
            temperature=temperature,
            message="temperatures above 1.0 make tool-call arguments unreliable",
        )
