from contentkit.rules.loader import load_rules, parse_rules
from contentkit.rules.models import Rules

__all__ = ["Rules", "load_rules", "parse_rules"]
