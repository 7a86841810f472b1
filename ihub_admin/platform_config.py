"""Authentication sections of platform.json: redaction, merging and change detection."""

import copy
import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ._utils import is_env_placeholder, load_json_file, logger

REDACTED = "***REDACTED***"

PLATFORM_FILE = Path("config") / "platform.json"

AUTH_SECTIONS = (
    "auth",
    "anonymousAuth",
    "proxyAuth",
    "localAuth",
    "oidcAuth",
    "ldapAuth",
    "ntlmAuth",
    "authorization",
    "oauth",
)

DEFAULT_PLATFORM_CONFIG: Dict[str, Any] = {
    "auth": {
        "mode": "proxy",
        "authenticatedGroup": "authenticated",
    },
    "anonymousAuth": {
        "enabled": True,
        "defaultGroups": ["anonymous"],
    },
    "proxyAuth": {
        "enabled": False,
        "userHeader": "X-Forwarded-User",
        "groupsHeader": "X-Forwarded-Groups",
        "jwtProviders": [],
    },
    "localAuth": {
        "enabled": False,
        "usersFile": "contents/config/users.json",
        "sessionTimeoutMinutes": 480,
        "jwtSecret": "${JWT_SECRET}",
    },
    "oidcAuth": {
        "enabled": False,
        "providers": [],
    },
}


def load_platform_config(contents_dir: Path) -> Optional[Dict[str, Any]]:
    """Read platform.json, or None if it does not exist or cannot be parsed."""
    path = contents_dir / PLATFORM_FILE
    try:
        data = load_json_file(path)
    except (OSError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def sanitize_secret(value: Any) -> Any:
    """Keep ``${ENV}`` placeholders, hide everything else."""
    if not value:
        return None
    if is_env_placeholder(value):
        return value
    return REDACTED


def restore_secret_if_redacted(new_value: Any, existing_value: Any) -> Any:
    return existing_value if new_value == REDACTED else new_value


def _set_or_drop(provider: Dict[str, Any], field: str, value: Any) -> None:
    # Empty secrets are left out instead of being stored as null
    if value is None:
        provider.pop(field, None)
    else:
        provider[field] = value


def sanitize_platform_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of ``config`` with secrets redacted for API responses."""
    sanitized = copy.deepcopy(config)

    for section in ("auth", "localAuth"):
        if (sanitized.get(section) or {}).get("jwtSecret"):
            sanitized[section]["jwtSecret"] = sanitize_secret(sanitized[section]["jwtSecret"])

    if (sanitized.get("admin") or {}).get("secret"):
        sanitized["admin"]["secret"] = sanitize_secret(sanitized["admin"]["secret"])

    for section, field in (("oidcAuth", "clientSecret"), ("ldapAuth", "adminPassword")):
        for provider in (sanitized.get(section) or {}).get("providers") or []:
            _set_or_drop(provider, field, sanitize_secret(provider.get(field)))

    # JWKS URLs and other provider settings stay server-side
    if (sanitized.get("proxyAuth") or {}).get("jwtProviders"):
        sanitized["proxyAuth"]["jwtProviders"] = [
            {
                "name": provider.get("name"),
                "header": provider.get("header"),
                "issuer": provider.get("issuer"),
                "audience": provider.get("audience"),
            }
            for provider in sanitized["proxyAuth"]["jwtProviders"]
        ]

    return sanitized


def _restore_provider_secrets(
    new_providers: List[Dict[str, Any]],
    existing_providers: List[Dict[str, Any]],
    field: str,
) -> List[Dict[str, Any]]:
    restored = []
    for index, provider in enumerate(new_providers):
        existing = existing_providers[index] if index < len(existing_providers) else {}
        provider = dict(provider)
        _set_or_drop(provider, field, restore_secret_if_redacted(provider.get(field), existing.get(field)))
        restored.append(provider)
    return restored


def merge_platform_config(existing: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay the authentication sections of ``update`` onto ``existing``.

    Non-auth keys of ``existing`` are preserved. Secrets sent back as
    ``***REDACTED***`` are replaced with the stored values.
    """
    merged = copy.deepcopy(existing)
    for section in AUTH_SECTIONS:
        if update.get(section):
            merged[section] = copy.deepcopy(update[section])

    for section in ("auth", "localAuth"):
        new_secret = (update.get(section) or {}).get("jwtSecret")
        if new_secret:
            merged.setdefault(section, {})["jwtSecret"] = restore_secret_if_redacted(
                new_secret, (existing.get(section) or {}).get("jwtSecret")
            )

    new_admin_secret = (update.get("admin") or {}).get("secret")
    if new_admin_secret:
        merged.setdefault("admin", {})["secret"] = restore_secret_if_redacted(
            new_admin_secret, (existing.get("admin") or {}).get("secret")
        )

    for section, field in (("oidcAuth", "clientSecret"), ("ldapAuth", "adminPassword")):
        new_providers = (update.get(section) or {}).get("providers")
        existing_providers = (existing.get(section) or {}).get("providers")
        if new_providers and existing_providers:
            merged.setdefault(section, {})["providers"] = _restore_provider_secrets(
                new_providers, existing_providers, field
            )

    return merged


def _changed(old: Dict[str, Any], new: Dict[str, Any], section: str) -> bool:
    return json.dumps(old.get(section), sort_keys=True) != json.dumps(new.get(section), sort_keys=True)


def reconfigure_authentication_methods(
    old_config: Dict[str, Any],
    new_config: Dict[str, Any],
    oidc_reconfigurer: Optional[Callable[[], None]] = None,
) -> Dict[str, List[str]]:
    """Work out what a platform config change means for running auth methods.

    Args:
        old_config: Configuration before the update
        new_config: Configuration as submitted
        oidc_reconfigurer: Hook that reloads OIDC providers in place

    Returns:
        Dictionary with ``reconfigured``, ``requiresRestart`` and ``notes`` lists
    """
    results = {"reconfigured": [], "requiresRestart": [], "notes": []}

    if _changed(old_config, new_config, "oidcAuth"):
        if oidc_reconfigurer is None:
            results["notes"].append("OIDC configuration updated (applied on next authentication)")
        else:
            try:
                oidc_reconfigurer()
                results["reconfigured"].append("OIDC providers")
                results["notes"].append("OIDC providers reconfigured successfully")
            except Exception as e:
                logger.error(f"Failed to reconfigure OIDC providers: {e}")
                results["notes"].append(f"OIDC reconfiguration failed: {e}")

    if _changed(old_config, new_config, "ntlmAuth"):
        results["requiresRestart"].append("NTLM authentication")
        results["notes"].append("NTLM authentication changes require server restart")

    automatic = (
        ("ldapAuth", "LDAP configuration updated (applied automatically on next authentication)"),
        ("localAuth", "Local authentication configuration updated (applied automatically)"),
        ("proxyAuth", "Proxy authentication configuration updated (applied automatically)"),
        ("anonymousAuth", "Anonymous authentication configuration updated (applied automatically)"),
    )
    for section, note in automatic:
        if _changed(old_config, new_config, section):
            results["notes"].append(note)

    return results
