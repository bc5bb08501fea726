# weatherflow/repository.py
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from pydantic import ValidationError
from sqlalchemy import JSON, DateTime, String
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import Mapped, declarative_base, mapped_column, sessionmaker
from sqlalchemy.sql import func

from .errors import StorageError
from .models import Workflow
from .sample import sample_workflow

logger = logging.getLogger(__name__)

Base = declarative_base()


class WorkflowRecord(Base):
    __tablename__ = "workflows"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, default="")
    nodes: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    edges: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class WorkflowRepository(Protocol):
    async def init(self) -> None:
        ...

    async def get(self, workflow_id: str) -> Optional[Workflow]:
        ...

    async def close(self) -> None:
        ...


def to_record(workflow: Workflow) -> WorkflowRecord:
    return WorkflowRecord(
        id=workflow.id,
        name=workflow.name,
        nodes=[node.model_dump(mode="json", by_alias=True) for node in workflow.nodes],
        edges=[edge.model_dump(mode="json", by_alias=True) for edge in workflow.edges],
    )


def from_record(record: WorkflowRecord) -> Workflow:
    try:
        return Workflow.model_validate({
            "id": record.id,
            "name": record.name,
            "nodes": record.nodes or [],
            "edges": record.edges or [],
            "createdAt": record.created_at,
            "updatedAt": record.updated_at,
        })
    except ValidationError as e:
        raise StorageError(f"decode workflow {record.id}: {e}") from e


class SQLWorkflowRepository:
    """Workflow definitions stored in the ``workflows`` table."""

    def __init__(self, database_url: str, seed: bool = True, echo: bool = False):
        self.seed = seed
        self.engine = create_async_engine(database_url, echo=echo)
        self.session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def init(self) -> None:
        """Create the schema and insert the sample workflow when missing."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise StorageError(f"init schema: {e}") from e
        if self.seed:
            await self.add(sample_workflow())

    async def add(self, workflow: Workflow) -> bool:
        """Insert ``workflow`` unless its id already exists; True if inserted."""
        try:
            async with self.session_factory() as session:
                if await session.get(WorkflowRecord, workflow.id) is not None:
                    return False
                session.add(to_record(workflow))
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"save workflow: {e}") from e
        logger.info("stored workflow %s (%s)", workflow.id, workflow.name)
        return True

    async def get(self, workflow_id: str) -> Optional[Workflow]:
        try:
            async with self.session_factory() as session:
                record = await session.get(WorkflowRecord, workflow_id)
        except SQLAlchemyError as e:
            raise StorageError(f"get workflow: {e}") from e
        if record is None:
            return None
        return from_record(record)

    async def close(self) -> None:
        await self.engine.dispose()


class InMemoryWorkflowRepository:
    """Dictionary-backed store for tests and runs without a database."""

    def __init__(self, workflows: Optional[List[Workflow]] = None, seed: bool = False):
        self.seed = seed
        self.workflows: Dict[str, Workflow] = {}
        for workflow in workflows or []:
            self.workflows[workflow.id] = workflow

    async def init(self) -> None:
        if self.seed:
            await self.add(sample_workflow())

    async def add(self, workflow: Workflow) -> bool:
        if workflow.id in self.workflows:
            return False
        self.workflows[workflow.id] = workflow
        return True

    async def get(self, workflow_id: str) -> Optional[Workflow]:
        workflow = self.workflows.get(workflow_id)
        # callers get their own copy; stored definitions never change
        return workflow.model_copy(deep=True) if workflow else None

    async def close(self) -> None:
        pass
