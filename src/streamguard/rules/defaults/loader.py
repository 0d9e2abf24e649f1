"""Bundled rule catalog and project override loader."""

from pathlib import Path
from typing import Any, Dict, Optional, Set, Union

import yaml

from streamguard.rules.domain.enums import RuleId
from streamguard.rules.domain.models import RuleConfig, RuleDefinition
from streamguard.shared.domain.exceptions import ConfigurationError
from streamguard.shared.infrastructure.config import settings
from streamguard.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

CATALOG_FILE = "pipeline_rules.yaml"


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error("rule_file_unreadable", path=str(path), error=str(e))
        raise ConfigurationError(f"Cannot read rule file {path}: {e}", context={"path": str(path)}) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Rule file {path} must contain a mapping", context={"path": str(path)})
    return data


def _parse_rule_ref(ref: Any, path: Path) -> RuleId:
    try:
        return RuleId.parse(ref)
    except ValueError as e:
        raise ConfigurationError(f"Unknown rule {ref!r} in {path}", context={"path": str(path), "rule": ref}) from e


def _expect(value: Any, expected: type, key: str, path: Path) -> Any:
    if not isinstance(value, expected):
        raise ConfigurationError(
            f"{key} in {path} must be a {expected.__name__}, got {type(value).__name__}",
            context={"path": str(path), "key": key},
        )
    return value


class DefaultRulesLoader:
    """Loads the rule catalog and merges project overrides on top of it."""

    def __init__(self, rules_dir: Optional[Path] = None):
        self.rules_dir = rules_dir or Path(__file__).parent

    def load_catalog(self) -> Dict[RuleId, RuleDefinition]:
        """
        Load the bundled rule catalog.

        Returns:
            Rule definitions keyed by id, in id order

        Raises:
            ConfigurationError: If the catalog is missing, malformed or incomplete
        """
        catalog_path = self.rules_dir / CATALOG_FILE
        data = _read_yaml(catalog_path)

        definitions: Dict[RuleId, RuleDefinition] = {}
        for rule_data in data.get("rules") or []:
            try:
                rule_id = RuleId.parse(rule_data["id"])
                definition = RuleDefinition(
                    rule_id=rule_id,
                    name=rule_data.get("name", rule_id.slug),
                    title=rule_data.get("title", rule_id.slug),
                    message=rule_data["message"],
                    enabled=bool(rule_data.get("enabled", True)),
                    heuristic=bool(rule_data.get("heuristic", False)),
                )
            except (KeyError, TypeError, ValueError) as e:
                raise ConfigurationError(
                    f"Invalid rule entry in {catalog_path}: {e}",
                    context={"path": str(catalog_path), "entry": rule_data},
                ) from e

            if definition.name != rule_id.slug:
                raise ConfigurationError(
                    f"Rule {int(rule_id)} is named {definition.name!r}, expected {rule_id.slug!r}",
                    context={"path": str(catalog_path)},
                )
            definitions[rule_id] = definition

        missing = [int(r) for r in RuleId if r not in definitions]
        if missing:
            raise ConfigurationError(
                f"Rule catalog {catalog_path} is missing rules {missing}",
                context={"path": str(catalog_path), "missing": missing},
            )

        logger.debug("rule_catalog_loaded", path=str(catalog_path), rules=len(definitions))
        return dict(sorted(definitions.items()))

    def load_config(
        self,
        override_path: Optional[Union[str, Path]] = None,
        parallel_threshold: Optional[int] = None,
    ) -> RuleConfig:
        """
        Build the effective checker configuration.

        Precedence, lowest first: catalog defaults, Settings, override file,
        explicit `parallel_threshold` argument.

        Override file format:
            parallel_threshold: 5000
            disabled: [8, trivial-iteration-misuse]
            rules:
              limit-before-sort:
                enabled: false
              7:
                message: "custom text"

        Raises:
            ConfigurationError: On unreadable files, unknown rules or a bad threshold
        """
        definitions = self.load_catalog()
        disabled: Set[RuleId] = set()
        threshold = settings.parallel_threshold

        if override_path is None and settings.rules_file:
            override_path = settings.rules_file

        if override_path is not None:
            path = Path(override_path)
            overrides = _read_yaml(path)
            threshold = overrides.get("parallel_threshold", threshold)

            disabled_refs = _expect(overrides.get("disabled") or [], list, "disabled", path)
            for ref in disabled_refs:
                disabled.add(_parse_rule_ref(ref, path))

            rule_overrides = _expect(overrides.get("rules") or {}, dict, "rules", path)
            for ref, values in rule_overrides.items():
                rule_id = _parse_rule_ref(ref, path)
                values = _expect(values or {}, dict, f"rules.{ref}", path)
                current = definitions[rule_id]
                definitions[rule_id] = RuleDefinition(
                    rule_id=rule_id,
                    name=current.name,
                    title=current.title,
                    message=_expect(values.get("message", current.message), str, f"rules.{ref}.message", path),
                    enabled=_expect(values.get("enabled", current.enabled), bool, f"rules.{ref}.enabled", path),
                    heuristic=current.heuristic,
                )

            logger.info(
                "rule_overrides_applied",
                path=str(path),
                disabled=sorted(int(r) for r in disabled),
                overridden=len(rule_overrides),
            )

        if parallel_threshold is not None:
            threshold = parallel_threshold

        if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold <= 0:
            raise ConfigurationError(
                f"parallel_threshold must be a positive integer, got {threshold!r}",
                context={"parallel_threshold": threshold},
            )

        return RuleConfig(
            definitions=definitions,
            disabled=frozenset(disabled),
            parallel_threshold=threshold,
        )
