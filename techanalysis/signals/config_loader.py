"""
YAML configuration loader for indicator settings.

Loads indicator configurations from YAML files, allowing settings to be
shared and tuned without code changes. Expected layout:

    indicators:
      rsi:
        period: 14
        overbought: 70
        oversold: 30
      williams_r:
        enabled: false
"""
import yaml
from pathlib import Path
from dataclasses import asdict, fields
from typing import Union

from .config import IndicatorConfig, merge_config


def load_config_from_yaml(yaml_path: Union[str, Path]) -> IndicatorConfig:
    """
    Load indicator configuration from a YAML file.

    Sections left out of the file keep their defaults.

    Args:
        yaml_path: Path to YAML configuration file

    Returns:
        IndicatorConfig object

    Raises:
        FileNotFoundError: If YAML file doesn't exist
        ValueError: If YAML is invalid or contains unknown sections/options
    """
    yaml_path = Path(yaml_path)

    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    try:
        with open(yaml_path, 'r') as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {yaml_path}: {e}") from e

    if not config_dict:
        raise ValueError(f"Empty config file: {yaml_path}")
    if not isinstance(config_dict, dict):
        raise ValueError(f"Config file must contain a mapping: {yaml_path}")

    indicators = config_dict.get('indicators', {})
    if indicators is None:
        indicators = {}
    return merge_config(indicators)


def save_config_to_yaml(config: IndicatorConfig, yaml_path: Union[str, Path]):
    """
    Save indicator configuration to a YAML file.

    Disabled families are written as `enabled: false`.

    Args:
        config: IndicatorConfig to save
        yaml_path: Path where YAML file will be saved
    """
    yaml_path = Path(yaml_path)
    yaml_path.parent.mkdir(parents=True, exist_ok=True)

    indicators = {}
    for section_field in fields(config):
        name = section_field.name
        section = getattr(config, name)
        if section is None:
            indicators[name] = {'enabled': False}
            continue
        values = asdict(section)
        if 'periods' in values:
            values['periods'] = list(values['periods'])
        indicators[name] = values

    with open(yaml_path, 'w') as f:
        yaml.dump({'indicators': indicators}, f, default_flow_style=False, sort_keys=False)
