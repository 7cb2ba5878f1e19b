from typing import Any, Dict, List, Union
import logging
from pathlib import Path

import yaml


def read_yaml_file(file_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Reads a YAML file and returns its content.

    Args:
        file_path (str | Path): The path to the YAML file.

    Returns:
        Dict[str, Any]: A dictionary containing the content of the YAML file.
            An empty file yields an empty dictionary.

    Raises:
        FileNotFoundError: If the YAML file does not exist.
        yaml.YAMLError: If the YAML file cannot be parsed.
    """
    try:
        with open(file_path, "r", encoding="utf-8") as file:
            try:
                return yaml.safe_load(file) or {}
            except yaml.YAMLError as exc:
                logging.error(f"Error parsing YAML file at {file_path}: {exc}")
                raise
    except FileNotFoundError:
        logging.error(f"YAML file not found at {file_path}.")
        raise FileNotFoundError(f"YAML file not found at {file_path}.")


def read_formula_lines(file_path: Union[str, Path]) -> List[str]:
    """Read one formula per line, skipping blank lines and `%` comments."""
    with open(file_path, "r", encoding="utf-8") as f:
        lines = [line.strip() for line in f]
    return [line for line in lines if line and not line.startswith("%")]
