"""
preset_engine.field_types - Registry of field type handlers.

A preset names its field types as plain strings.  Only tags registered
here can be instantiated; get_field_type() returns None for anything
else and the reconciler reports the field as missing.
"""

from __future__ import annotations

from typing import Callable, Optional

from db.models import DataField, DataModule
from services.data_store import DataStore

_registry: dict[str, type["FieldType"]] = {}


def register_field_type(tag: str) -> Callable[[type["FieldType"]], type["FieldType"]]:
    def decorator(cls: type[FieldType]) -> type[FieldType]:
        cls.type_name = tag
        _registry[tag] = cls
        return cls
    return decorator


def get_field_type(tag: str) -> Optional[type["FieldType"]]:
    return _registry.get(tag)


def registered_types() -> list[str]:
    return sorted(_registry)


class FieldType:
    """
    Base handler: wraps one DataField and knows how to persist it.

    Subclasses only declare ``defaults`` (values for param columns the
    preset left unset on a new field).
    """

    type_name = ""
    defaults: dict[str, str] = {}

    def __init__(self, field: DataField, module: DataModule):
        self.field = field
        self.module = module

    @classmethod
    def from_attributes(cls, attrs: dict, module: DataModule) -> "FieldType":
        """Build an unsaved DataField from imported attributes."""
        columns = DataField.attribute_names() - {"id"}
        field = DataField(**{k: v for k, v in attrs.items() if k in columns})
        field.dataid = module.id
        return cls(field, module)

    def apply(self, attrs: dict, skip: frozenset = frozenset()) -> list[str]:
        """
        Copy *attrs* onto the live field.  Returns the names that have no
        column and were ignored.
        """
        columns = DataField.attribute_names()
        ignored = []
        for key, value in attrs.items():
            if key in skip:
                continue
            if key in columns:
                setattr(self.field, key, value)
            else:
                ignored.append(key)
        return ignored

    def define_defaults(self):
        if self.field.description is None:
            self.field.description = ""
        if self.field.required is None:
            self.field.required = 0
        for key, value in self.defaults.items():
            if getattr(self.field, key) in (None, ""):
                setattr(self.field, key, value)

    def insert_field(self, store: DataStore) -> DataField:
        self.define_defaults()
        return store.insert_field(self.field)

    def update_field(self, store: DataStore) -> DataField:
        return store.update_field(self.field)


# ── Built-in types ─────────────────────────────────────────────────────

@register_field_type("text")
class TextField(FieldType):
    defaults = {"param1": "0"}              # autolink off


@register_field_type("textarea")
class TextareaField(FieldType):
    defaults = {"param2": "60", "param3": "35", "param5": "0"}   # cols, rows, max bytes


@register_field_type("number")
class NumberField(FieldType):
    defaults = {"param1": "0"}              # decimals


@register_field_type("date")
class DateField(FieldType):
    pass


@register_field_type("url")
class UrlField(FieldType):
    defaults = {"param1": "0"}              # autolink


@register_field_type("menu")
class MenuField(FieldType):
    defaults = {"param1": ""}               # one option per line


@register_field_type("multimenu")
class MultiMenuField(FieldType):
    defaults = {"param1": ""}


@register_field_type("radiobutton")
class RadioButtonField(FieldType):
    defaults = {"param1": ""}


@register_field_type("checkbox")
class CheckboxField(FieldType):
    defaults = {"param1": ""}


@register_field_type("file")
class FileField(FieldType):
    defaults = {"param3": "0"}              # max size, 0 = site limit


@register_field_type("picture")
class PictureField(FieldType):
    defaults = {"param1": "", "param2": "", "param4": "100", "param5": "100"}


@register_field_type("latlong")
class LatLongField(FieldType):
    defaults = {"param1": "Google Maps\r\nOpenStreetMap", "param2": "-1"}
