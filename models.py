from typing import Any, Dict, List, Optional
from sqlmodel import Field, SQLModel


class OutgoingRecord(SQLModel):
    name: str
    notes: str
    status: Optional[str] = None

    def to_fields(self) -> Dict[str, str]:
        fields = {"Name": self.name, "Notes": self.notes}
        if self.status is not None:
            fields["Status"] = self.status
        return fields


class StoreRecord(SQLModel):
    id: str
    fields: Dict[str, Any] = Field(default_factory=dict)
    created_time: Optional[str] = None

    def summary(self) -> Dict[str, Any]:
        return {"id": self.id, "fields": self.fields}


class SortSpec(SQLModel):
    field: str
    direction: str = "asc"


class ListOptions(SQLModel):
    max_records: int = 100
    view: str = "Grid view"
    filter_by_formula: str = ""
    sort: List[SortSpec] = Field(default_factory=list)


class FieldSpec(SQLModel):
    name: str
    type: str
    choices: List[str] = Field(default_factory=list)


class SchemaSnapshot(SQLModel):
    table_name: str
    fields: List[FieldSpec] = Field(default_factory=list)
    probed: bool = False
    sample_count: int = 0

    def field(self, name: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None
