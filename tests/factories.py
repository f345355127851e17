import factory
from factory.alchemy import SQLAlchemyModelFactory
from sqlalchemy import orm

from db.models import DataModule, DataField, DataRecord, DataContent

# Bound to a fresh engine by the fixtures in conftest.py
Session = orm.scoped_session(orm.sessionmaker())


class BaseFactory(SQLAlchemyModelFactory):

    class Meta:
        abstract = True
        sqlalchemy_session = Session
        sqlalchemy_session_persistence = "flush"


class DataModuleFactory(BaseFactory):
    """Factory for creating DataModule instances."""

    class Meta:
        model = DataModule

    course = 1
    name = factory.Sequence(lambda n: f"Database {n}")
    intro = "Existing intro"
    requiredentries = 0
    maxentries = 10
    approval = 0
    defaultsort = 0
    defaultsortdir = 0
    singletemplate = "<p>old single</p>"
    listtemplate = "<p>old list</p>"


class DataFieldFactory(BaseFactory):
    """Factory for creating DataField instances attached to a module."""

    class Meta:
        model = DataField
        exclude = ("module",)

    module = factory.SubFactory(DataModuleFactory)
    dataid = factory.SelfAttribute("module.id")
    type = "text"
    name = factory.Sequence(lambda n: f"Field {n}")
    description = ""
    required = 0


class DataRecordFactory(BaseFactory):

    class Meta:
        model = DataRecord
        exclude = ("module",)

    module = factory.SubFactory(DataModuleFactory)
    dataid = factory.SelfAttribute("module.id")
    userid = 2


class DataContentFactory(BaseFactory):
    """One stored value; the record belongs to the field's module."""

    class Meta:
        model = DataContent
        exclude = ("field", "record")

    field = factory.SubFactory(DataFieldFactory)
    record = factory.SubFactory(
        DataRecordFactory,
        module=None,
        dataid=factory.SelfAttribute("..field.dataid"),
    )
    fieldid = factory.SelfAttribute("field.id")
    recordid = factory.SelfAttribute("record.id")
    content = factory.Faker("sentence")
