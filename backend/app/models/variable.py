"""变量与分组模型（config.json）"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_GROUP_ID = "default"
DEFAULT_GROUP_NAME = "默认分组"


class Group(BaseModel):
    """变量分组"""

    id: str
    name: str


class Variable(BaseModel):
    """变量"""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    value: str
    group_id: str = Field(default=DEFAULT_GROUP_ID, alias="groupId")

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_scalar(cls, value: Any) -> Any:
        # 手工编辑 config.json 时数字、布尔值按文本保存
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int | float):
            return str(value)
        return value


def default_group() -> Group:
    return Group(id=DEFAULT_GROUP_ID, name=DEFAULT_GROUP_NAME)


class ConfigDocument(BaseModel):
    """config.json 的完整内容"""

    groups: list[Group] = Field(default_factory=lambda: [default_group()])
    variables: list[Variable] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _upgrade_legacy(cls, data: Any) -> Any:
        # 旧版本的 config.json 只有 variables，没有分组
        if isinstance(data, dict) and "groups" not in data:
            data = dict(data)
            data["groups"] = [default_group().model_dump()]
            data["variables"] = [
                {**v, "groupId": DEFAULT_GROUP_ID} if isinstance(v, dict) else v
                for v in data.get("variables") or []
            ]
        return data

    @model_validator(mode="after")
    def _repair_groups(self) -> "ConfigDocument":
        if self.find_group(DEFAULT_GROUP_ID) is None:
            self.groups.insert(0, default_group())
        known = {g.id for g in self.groups}
        for variable in self.variables:
            if variable.group_id not in known:
                variable.group_id = DEFAULT_GROUP_ID
        return self

    def find_variable(self, name: str) -> Variable | None:
        return next((v for v in self.variables if v.name == name), None)

    def find_group(self, group_id: str) -> Group | None:
        return next((g for g in self.groups if g.id == group_id), None)
