import datetime
import typing as t

import pydantic as p


class BaseModel(p.BaseModel):
    """Project-wide base model.

    Dumps use field aliases unless asked otherwise; settings models depend on
    this to produce ``logging.config.dictConfig`` keys such as ``()`` and
    ``class``.
    """

    def model_dump(self, **kwargs: t.Any) -> dict[str, t.Any]:
        kwargs.setdefault("by_alias", True)
        return super().model_dump(**kwargs)

    def model_dump_json(self, **kwargs: t.Any) -> str:
        kwargs.setdefault("by_alias", True)
        return super().model_dump_json(**kwargs)


class WithTimestamps(BaseModel):
    create_time: datetime.datetime
    update_time: datetime.datetime
