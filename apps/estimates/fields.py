from django.db import models

from .coercion import normalize_flag


class FlagField(models.BooleanField):
    """
    BooleanField that accepts ``0/1``, ``'0'/'1'`` and ``'true'/'false'``.

    Values are normalized on the way in (save, lookups) and on the way out of
    the database, so model code only ever sees ``True`` or ``False``.
    """

    description = 'Boolean (normalized from loose representations)'

    def to_python(self, value):
        if value is None and self.null:
            return None
        return normalize_flag(value)

    def from_db_value(self, value, expression, connection):
        if value is None:
            return value
        return normalize_flag(value)

    def get_prep_value(self, value):
        if value is None:
            return None
        return normalize_flag(value)

    def pre_save(self, model_instance, add):
        value = getattr(model_instance, self.attname)
        if value is not None or not self.null:
            value = normalize_flag(value)
            setattr(model_instance, self.attname, value)
        return value
