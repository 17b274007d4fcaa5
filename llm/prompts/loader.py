"""Loading and rendering of the YAML prompt files in this directory."""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from logger import get_logger

logger = get_logger()

REQUIRED_KEYS = ("system_prompt", "user_prompt_template")


class PromptManager:
    """Loads prompt files once and renders them with request variables.

    A prompt file holds ``system_prompt``, ``user_prompt_template`` and
    optional ``parameters`` (model, temperature) and ``version``.

    Args:
        prompts_dir: Directory containing prompt YAML files; defaults to
            the directory of this module.
    """

    def __init__(self, prompts_dir: Optional[Path] = None):
        self.prompts_dir = prompts_dir or Path(__file__).parent
        self._cache: Dict[str, Dict[str, Any]] = {}

    def load_prompt(self, prompt_name: str) -> Dict[str, Any]:
        """Load a prompt configuration, reading the file only the first time.

        Raises:
            FileNotFoundError: If the prompt file doesn't exist.
            ValueError: If the file is not a mapping or lacks required keys.
            yaml.YAMLError: If the YAML is invalid.
        """
        if prompt_name in self._cache:
            return self._cache[prompt_name]

        prompt_file = self.prompts_dir / f"{prompt_name}.yaml"
        if not prompt_file.exists():
            raise FileNotFoundError(f"Prompt file not found: {prompt_file}")

        logger.debug(f"Loading prompt from {prompt_file}")
        with open(prompt_file, "r", encoding="utf-8") as f:
            prompt_config = yaml.safe_load(f)

        if not isinstance(prompt_config, dict):
            raise ValueError(f"Prompt file {prompt_file} must contain a mapping")
        missing = [key for key in REQUIRED_KEYS if key not in prompt_config]
        if missing:
            raise ValueError(f"Prompt file {prompt_file} is missing: {', '.join(missing)}")

        self._cache[prompt_name] = prompt_config
        return prompt_config

    def render_prompt(
        self, prompt_name: str, variables: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Render a prompt for one request.

        Placeholders are ``{name}``. They are substituted by name rather than
        with ``str.format`` so JSON braces in values and templates survive.

        Returns:
            Dictionary with system_prompt, user_prompt, parameters and version.
        """
        prompt_config = self.load_prompt(prompt_name)

        user_prompt = prompt_config["user_prompt_template"]
        for name, value in variables.items():
            user_prompt = user_prompt.replace("{" + name + "}", str(value))

        return {
            "system_prompt": prompt_config["system_prompt"],
            "user_prompt": user_prompt,
            "parameters": prompt_config.get("parameters") or {},
            "version": str(prompt_config.get("version", "unknown")),
        }
