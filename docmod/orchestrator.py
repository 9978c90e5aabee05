"""Pipeline orchestration for the build and inspect flows."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import DocModConfig, load_config
from .extractors import Extractor, PythonExtractor
from .logging import get_logger
from .models import Module
from .module import build_module
from .render import SiteRenderer
from .source import SourceReader


@dataclass
class BuildResult:
    """Outcome of a build run."""

    module: Module
    written: List[Path]
    output_dir: Path


class Orchestrator:
    """Coordinates extraction, document building and rendering for one source tree."""

    def __init__(self, extractor: Extractor | None = None) -> None:
        self._extractor_override = extractor
        self.logger = get_logger("orchestrator")

    def load_module(self, src: str | Path, config: DocModConfig | None = None) -> Module:
        """Extract and build the module document for ``src`` without rendering it."""
        src_path = Path(src).expanduser().resolve()
        config = config or load_config(src_path)
        extractor = self._extractor_override or PythonExtractor(
            module=config.module, exclude_paths=config.exclude_paths
        )
        import_root = extractor.import_root(src_path)
        self.logger.info("Documenting %s from %s", import_root, src_path)
        raw_packages = extractor.extract(src_path, import_root)
        self.logger.debug("Extractor produced %d packages", len(raw_packages))
        return build_module(
            import_root,
            src_path.name,
            raw_packages,
            reader=SourceReader(),
            stdlib_url=config.stdlib_url,
        )

    def run_build(
        self,
        src: str | Path,
        output: str | Path | None = None,
        *,
        package_template: str | Path | None = None,
        index_template: str | Path | None = None,
    ) -> BuildResult:
        """Build the site for ``src``; explicit arguments override .docmod.yml."""
        src_path = Path(src).expanduser().resolve()
        config = load_config(src_path)
        module = self.load_module(src_path, config)

        output_dir = self._pick_path(output, config.output_dir) or Path.cwd()
        renderer = SiteRenderer(
            package_template=self._pick_path(package_template, config.package_template),
            index_template=self._pick_path(index_template, config.index_template),
        )
        written = renderer.write(module, output_dir)
        return BuildResult(module=module, written=written, output_dir=output_dir)

    def run_inspect(self, src: str | Path) -> Dict[str, Any]:
        """Return the module document as plain JSON-serialisable data."""
        module = self.load_module(src)
        return {
            "name": module.name,
            "import_path": module.import_path,
            "dir_name": module.dir_name,
            "packages": [asdict(package) for package in module.packages],
        }

    @staticmethod
    def _pick_path(explicit: str | Path | None, configured: Optional[Path]) -> Optional[Path]:
        if explicit is not None:
            return Path(explicit).expanduser()
        return configured


__all__ = ["BuildResult", "Orchestrator"]
