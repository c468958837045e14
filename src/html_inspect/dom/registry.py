# src/html_inspect/dom/registry.py
import importlib
import logging
import pkgutil
from typing import Dict, List, Optional

from .core import CollectorDefinition

logger = logging.getLogger(__name__)


class CollectorRegistry:
    """
    Central registry for document collectors.

    Dynamically discovers the modules in the 'html_inspect.dom.collectors'
    package and registers every CollectorDefinition they expose.
    """

    _collectors: Dict[str, CollectorDefinition] = {}
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        """
        Discovers and registers all collector definitions found in the
        `html_inspect.dom.collectors` package. Safe to call repeatedly.
        """
        if cls._loaded:
            return

        import html_inspect.dom.collectors as collectors_pkg

        for _, name, _ in pkgutil.iter_modules(collectors_pkg.__path__):
            full_name = f"html_inspect.dom.collectors.{name}"
            module = importlib.import_module(full_name)

            definitions = getattr(module, "DEFINITIONS", None)
            if definitions is None and hasattr(module, "DEFINITION"):
                definitions = [module.DEFINITION]

            for defn in definitions or []:
                if not isinstance(defn, CollectorDefinition):
                    logger.error("Ignoring %r in %s: not a CollectorDefinition", defn, full_name)
                    continue
                cls.register(defn)

        cls._loaded = True

    @classmethod
    def register(cls, defn: CollectorDefinition) -> None:
        if defn.name in cls._collectors and cls._collectors[defn.name] is not defn:
            logger.warning("Collector '%s' is registered twice; keeping the latest.", defn.name)
        cls._collectors[defn.name] = defn
        logger.debug("Collector loaded: %s", defn.name)

    @classmethod
    def get(cls, name: str) -> Optional[CollectorDefinition]:
        """Retrieves the definition of a collector by name."""
        cls.discover()
        return cls._collectors.get(name)

    @classmethod
    def get_all(cls) -> List[CollectorDefinition]:
        """Returns all registered collectors, in registration order."""
        cls.discover()
        return list(cls._collectors.values())

    @classmethod
    def names(cls) -> List[str]:
        return [defn.name for defn in cls.get_all()]
