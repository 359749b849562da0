"""Catalog document schema.

A catalog is a JSON document listing declaration types::

    {
      "declarations": [
        {
          "type": "com.example.Service",
          "meta": [{"type": "com.example.Component", "attributes": {"name": "svc"}}],
          "attributes": [
            {
              "name": "name",
              "shape": "text",
              "default": "",
              "meta": [
                {
                  "type": "metamerge.alias_for",
                  "attributes": {"declaration": "com.example.Component"}
                }
              ]
            }
          ]
        }
      ]
    }
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, JsonValue, field_validator, model_validator

from metamerge.domain.model import AttributeShape


class CatalogBaseModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)


class MetaDeclarationModel(CatalogBaseModel):
    type: str = Field(min_length=1)
    attributes: dict[str, JsonValue] = Field(default_factory=dict)


class AttributeModel(CatalogBaseModel):
    name: str = Field(min_length=1)
    shape: str
    default: JsonValue | None = None
    meta: list[MetaDeclarationModel] = Field(default_factory=list)

    @field_validator("shape")
    @classmethod
    def _check_shape(cls, value: str) -> str:
        AttributeShape.parse(value)
        return value.strip()

    @property
    def parsed_shape(self) -> AttributeShape:
        return AttributeShape.parse(self.shape)


class DeclarationModel(CatalogBaseModel):
    type: str = Field(min_length=1)
    meta: list[MetaDeclarationModel] = Field(default_factory=list)
    attributes: list[AttributeModel] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_attribute_names(self) -> DeclarationModel:
        seen: set[str] = set()
        for attribute in self.attributes:
            if attribute.name in seen:
                raise ValueError(f"Duplicate attribute '{attribute.name}' in [{self.type}]")
            seen.add(attribute.name)
        return self


class CatalogDocument(CatalogBaseModel):
    version: int = 1
    declarations: list[DeclarationModel] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_declaration_types(self) -> CatalogDocument:
        seen: set[str] = set()
        for declaration in self.declarations:
            if declaration.type in seen:
                raise ValueError(f"Duplicate declaration type [{declaration.type}]")
            seen.add(declaration.type)
        return self
