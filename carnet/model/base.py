import datetime
import typing as t

import pydantic as p


class BaseModel(p.BaseModel):
    def model_dump(self, *, by_alias: bool = True, **kwargs: t.Any) -> dict[str, t.Any]:
        # dump by alias unless told otherwise
        return super().model_dump(by_alias=by_alias, **kwargs)


class FrozenModel(BaseModel):
    model_config = p.ConfigDict(frozen=True)


class WithCtime(BaseModel):
    # set once on insert, never updated; edit windows are measured from it
    create_time: datetime.datetime


class WithMtime(BaseModel):
    update_time: datetime.datetime


class WithTimestamps(WithCtime, WithMtime): ...
