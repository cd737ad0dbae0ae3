import logging

from barakaflow.client.storage import INVITED_MEMBERS_KEY, LocalStore

logger = logging.getLogger(__name__)


def invited_members(store: LocalStore) -> list[dict]:
    members = store.get(INVITED_MEMBERS_KEY) or []
    if not isinstance(members, list):
        logger.warning("Invited members entry is not a list; ignoring it")
        return []
    return [m for m in members if isinstance(m, dict) and m.get("email")]


def add_invited_member(store: LocalStore, member: dict) -> bool:
    """Remember an invited member; returns False when the email is already known."""
    email = (member.get("email") or "").strip()
    if not email:
        raise ValueError("Invited member needs an email")

    members = invited_members(store)
    if any(m["email"].lower() == email.lower() for m in members):
        return False

    entry = {"email": email}
    if member.get("name"):
        entry["name"] = member["name"].strip()
    store.set(INVITED_MEMBERS_KEY, [*members, entry])
    return True


def available_owners(current_user_name: str, invited: list[dict]) -> list[str]:
    # Current user first, then each member by name (or email when unnamed)
    owners = [current_user_name]
    for member in invited:
        label = member.get("name") or member.get("email")
        if label and label not in owners:
            owners.append(label)
    return owners
