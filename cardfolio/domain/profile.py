"""Profile rules: user types, their field groups and avatar derivation."""
from __future__ import annotations

from enum import Enum
from typing import Any, Mapping


class UserType(str, Enum):
    STUDENT = "student"
    BUSINESSMAN = "businessman"
    OFFICIAL = "official"


class AvatarOption(str, Enum):
    NONE = "none"
    ROBOT = "robot"
    CAT = "cat"
    CUSTOM = "custom"


TYPE_FIELDS: dict[UserType, tuple[str, ...]] = {
    UserType.STUDENT: ("institutionName", "department", "aimInLife", "hobby"),
    UserType.BUSINESSMAN: ("businessName", "businessType", "position", "company"),
    UserType.OFFICIAL: (
        "jobTitle",
        "department",
        "officialPosition",
        "company",
        "officeAddress",
        "officialPhone",
        "companyWebsite",
    ),
}

ALL_TYPE_FIELDS: tuple[str, ...] = tuple(dict.fromkeys(f for fields in TYPE_FIELDS.values() for f in fields))

CONTACT_FIELDS = ("fullName", "phone", "email", "website", "linkedin", "facebook", "bio")

ROBOT_AVATAR_FEMALE = "https://avatar.iran.liara.run/public/80"
ROBOT_AVATAR_DEFAULT = "https://avatar.iran.liara.run/public/43"
CAT_AVATAR_TEMPLATE = "https://robohash.org/{user_id}?set=set4&bgset=bg1&size=400x400"

# keys exposed by the public card endpoint
CARD_FIELDS = (
    "userType",
    "fullName",
    "jobTitle",
    "department",
    "company",
    "institutionName",
    "businessName",
    "position",
    "officialPosition",
    "phone",
    "email",
    "website",
    "linkedin",
    "facebook",
    "bio",
    "avatar",
    "profilePicture",
    "socialMedias",
)


def default_profile() -> dict:
    profile: dict[str, Any] = {
        "userType": UserType.STUDENT.value,
        "gender": "",
        "avatar": "",
        "avatarOption": AvatarOption.NONE.value,
        "avatarCustomUrl": "",
        "profilePicture": None,
        "socialMedias": [],
    }
    for key in CONTACT_FIELDS + ALL_TYPE_FIELDS:
        profile[key] = ""
    return profile


def active_fields(user_type: UserType | str) -> tuple[str, ...]:
    return TYPE_FIELDS[UserType(user_type)]


def switch_user_type(profile: Mapping[str, Any], user_type: UserType | str) -> dict:
    """Return a copy with the new type set and every type-specific field emptied."""
    new_type = UserType(user_type)
    updated = dict(profile)
    updated["userType"] = new_type.value
    for key in ALL_TYPE_FIELDS:
        updated[key] = ""
    return updated


def derive_avatar(option: AvatarOption | str, *, user_id: str, gender: str = "", custom_url: str = "") -> str:
    choice = AvatarOption(option)
    if choice is AvatarOption.ROBOT:
        return ROBOT_AVATAR_FEMALE if (gender or "").lower() == "female" else ROBOT_AVATAR_DEFAULT
    if choice is AvatarOption.CAT:
        return CAT_AVATAR_TEMPLATE.format(user_id=user_id)
    if choice is AvatarOption.CUSTOM:
        return custom_url or ""
    return ""


def apply_avatar_option(profile: Mapping[str, Any], option: AvatarOption | str, *, user_id: str) -> dict:
    updated = dict(profile)
    updated["avatarOption"] = AvatarOption(option).value
    updated["avatar"] = derive_avatar(
        option,
        user_id=user_id,
        gender=updated.get("gender") or "",
        custom_url=updated.get("avatarCustomUrl") or "",
    )
    return updated


def apply_custom_avatar_url(profile: Mapping[str, Any], url: str) -> dict:
    updated = dict(profile)
    updated["avatarCustomUrl"] = url
    updated["avatar"] = url
    return updated


def apply_gender(profile: Mapping[str, Any], gender: str) -> dict:
    """Changing gender invalidates a generated avatar."""
    updated = dict(profile)
    updated["gender"] = gender
    updated["avatarOption"] = AvatarOption.NONE.value
    updated["avatar"] = ""
    return updated


def fill_generated_avatar(profile: Mapping[str, Any], *, user_id: str) -> dict:
    """Fill `avatar` for generated options saved without a URL."""
    updated = dict(profile)
    option = updated.get("avatarOption") or AvatarOption.NONE.value
    if option in (AvatarOption.ROBOT.value, AvatarOption.CAT.value) and not updated.get("avatar"):
        updated["avatar"] = derive_avatar(option, user_id=user_id, gender=updated.get("gender") or "")
    if not isinstance(updated.get("socialMedias"), list):
        updated["socialMedias"] = []
    return updated


def card_view(profile: Mapping[str, Any]) -> dict:
    return {key: profile.get(key) for key in CARD_FIELDS}
