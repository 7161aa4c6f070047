"""Record types exchanged with the member database and the TCRS gateway."""

from __future__ import annotations

from dataclasses import MISSING, dataclass, field, fields
from typing import Any, Mapping

_ABSENT = object()


def _json(key: str, default: Any = None, *, factory: Any = None, omitempty: bool = False) -> Any:
    """Declare a dataclass field stored under ``key`` in JSON."""
    meta = {"json": key, "omitempty": omitempty}
    if factory is not None:
        return field(default_factory=factory, metadata=meta)
    return field(default=default, metadata=meta)


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


def _field(data: Mapping[str, Any], key: str, kind: type, default: Any) -> Any:
    """Look up ``key`` exactly, then case-insensitively; check the value's type.

    Missing or null values give ``default``; a wrong type raises ValueError.
    """
    value = data.get(key, _ABSENT)
    if value is _ABSENT:
        folded = key.casefold()
        value = next(
            (v for k, v in data.items() if isinstance(k, str) and k.casefold() == folded),
            _ABSENT,
        )
    if value is _ABSENT or value is None:
        return default
    ok = isinstance(value, kind) and not (kind is int and isinstance(value, bool))
    if not ok:
        raise ValueError(f"field {key!r} must be {kind.__name__}, got {type(value).__name__}")
    return value


def _decode(cls: type, data: Any) -> Any:
    """Build a dataclass whose fields were declared with ``_json``."""
    data = _require_mapping(data, cls.__name__)
    values = {}
    for f in fields(cls):
        if "json" not in f.metadata:
            continue
        default = f.default if f.default is not MISSING else f.default_factory()
        kind = type(default)
        if hasattr(kind, "from_dict"):
            raw = _field(data, f.metadata["json"], dict, None)
            values[f.name] = default if raw is None else kind.from_dict(raw)
        else:
            values[f.name] = _field(data, f.metadata["json"], kind, default)
    return cls(**values)


def _encode(obj: Any) -> dict[str, Any]:
    return {
        f.metadata["json"]: getattr(obj, f.name)
        for f in fields(obj)
        if "json" in f.metadata and not (f.metadata["omitempty"] and not getattr(obj, f.name))
    }


@dataclass
class AsdMember:
    """A member whose age is to be checked."""

    pnumber: str = _json("PNumber", "")
    telecom: int = _json("Telecom", 0)
    pcode: str = _json("PCCode", "")
    age: int = _json("Age", 0)
    reg_dt: str = _json("RegDT", "")
    complete: int = _json("Complete", 0)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AsdMember:
        return _decode(cls, data)

    def to_dict(self) -> dict[str, Any]:
        return _encode(self)


@dataclass
class LGUPUserInfo:
    """LGUP user information reply, including the age field."""

    resp_code: int = _json("RESPCODE", 0)
    resp_msg: str = _json("RESPMSG", "")
    age: str = _json("AGE_OUT", "")
    ctn_stus_code: str = _json("CTN_STUS_CODE", "")
    mdl_value: str = _json("MDL_VALUE", "")
    unit_mdl: str = _json("UNIT_MDL", "")
    young_fee_yn: str = _json("YOUNG_FEE_YN", "")
    svc_auth_dt: str = _json("SVC_AUTH_DT", "")
    unit_loss_yn_code: str = _json("UNIT_LOSS_YN_CODE", "")
    real_birth_pers_id: str = _json("REAL_BIRTH_PERS_ID", "", omitempty=True)
    sub_birth_pers_id: str = _json("SUB_BIRTH_PERS_ID", "", omitempty=True)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LGUPUserInfo:
        return _decode(cls, data)

    def to_dict(self) -> dict[str, Any]:
        return _encode(self)