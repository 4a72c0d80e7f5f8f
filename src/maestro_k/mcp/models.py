"""Records returned by the MCP server's tools."""

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr


class DatabaseInfo(BaseModel):
    """One vector database as reported by the ``list_databases`` tool.

    Fields are strict: a count sent as ``"42"``, ``42.0`` or ``true`` is rejected.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: StrictStr
    kind: StrictStr = Field(alias="type")  # milvus / weaviate / ...
    collection: StrictStr
    document_count: StrictInt = Field(ge=0)
