"""pydantic-settings sources reading the YAML configuration tree.

A config root looks like::

    config/
        logging.yaml
        storage.yaml
        web.yaml
        secrets.yaml        # optional, see secrets.example.yaml
        env.d/
            production/
                web.yaml    # only the keys production changes

Every source needs the ``root`` and ``env`` init arguments of the settings
class to find its files.
"""

import functools
import typing as t
from pathlib import Path

import pydantic as p
import yaml
from pydantic.fields import FieldInfo
from pydantic_settings import PydanticBaseSettingsSource, SettingsError

import carnet.lib.util as util
from carnet.model import DeploymentEnvironment

# fields naming where to look, not configuration proper
_locators = frozenset({"root", "env", "override"})


def config_dirs(root: p.AnyUrl, env: DeploymentEnvironment) -> list[Path]:
    """Directories to read, in increasing order of precedence."""
    if root.scheme != "file" or root.path is None:
        raise SettingsError(f"configuration root must be a file:// URL, not {root}")
    base = Path(root.path)
    if env is DeploymentEnvironment.Local:
        return [base]
    return [base, base / "env.d" / env.value]


def load_yaml(path: Path) -> t.Any:
    try:
        return yaml.safe_load(path.read_text(encoding="utf8"))
    except yaml.YAMLError as e:
        raise SettingsError(f"{path}: invalid YAML") from e


class _SectionSource(PydanticBaseSettingsSource):
    """A source that produces whole sections, already merged."""

    def sections(self) -> dict[str, t.Any]:
        raise NotImplementedError

    @functools.cached_property
    def _sections(self) -> dict[str, t.Any]:
        return self.sections()

    @property
    def root(self) -> p.AnyUrl:
        return p.AnyUrl(str(self.current_state["root"]))

    @property
    def env(self) -> DeploymentEnvironment:
        return DeploymentEnvironment(self.current_state["env"])

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        if field_name in _locators or field_name not in self._sections:
            raise KeyError(field_name)
        return self._sections[field_name], field_name, True

    def __call__(self) -> dict[str, t.Any]:
        data: dict[str, t.Any] = {}
        for field_name, field in self.settings_cls.model_fields.items():
            try:
                value, key, _ = self.get_field_value(field, field_name)
            except KeyError:
                continue
            data[key] = value
        return data


class YAMLCascadingSettingsSource(_SectionSource):
    """Read `<field>.yaml` from the config root, then from `env.d/<env>/`.

    Later files are deep-merged over earlier ones, so an environment only
    needs to spell out the keys it changes.
    """

    def sections(self) -> dict[str, t.Any]:
        merged: dict[str, t.Any] = {}
        for name in self.settings_cls.model_fields:
            if name in _locators:
                continue
            for d in config_dirs(self.root, self.env):
                fn = d / f"{name}.yaml"
                if not fn.exists():
                    continue
                doc = load_yaml(fn)
                if isinstance(doc, dict) and isinstance(merged.get(name), dict):
                    merged[name] = util.deep_update(merged[name], t.cast(dict[str, t.Any], doc))
                else:
                    merged[name] = doc
        return merged


class OverrideSettingsSource(_SectionSource):
    """``section.key.path=value`` pairs given on the command line.

    Values are parsed as YAML, so ``-o web.carnet.backend.port=8080`` sets an
    int and ``-o web.carnet.frontend=null`` clears a section.
    """

    def sections(self) -> dict[str, t.Any]:
        merged: dict[str, t.Any] = {}
        for item in self.current_state.get("override", ()):
            key, sep, raw = item.partition("=")
            if not sep or not key.strip():
                raise SettingsError(f"override {item!r} is not of the form key.path=value")
            merged = util.deep_update(merged, util.nest(key.strip(), yaml.safe_load(raw.strip())))
        return merged


class YAMLSecretsSource(_SectionSource):
    """Read secrets from `secrets.yaml` beside the configuration files."""

    def sections(self) -> dict[str, t.Any]:
        merged: dict[str, t.Any] = {}
        for d in config_dirs(self.root, self.env):
            fn = d / "secrets.yaml"
            if fn.exists():
                merged = util.deep_update(merged, load_yaml(fn) or {})
        return merged
