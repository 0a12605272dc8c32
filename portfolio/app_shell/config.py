import os

from portfolio.rules.models import Rules


def missing_env(rules: Rules) -> list[str]:
    return [name for name in rules.ops.required_env if not os.environ.get(name)]


def validate_ops_rules(rules: Rules) -> None:
    """
    Validate operational requirements before startup.

    Raises RuntimeError naming every required environment variable that is unset.
    """
    missing = missing_env(rules)
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")
