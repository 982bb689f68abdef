from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from nodeclean.storeconfigs.database import HostDB, ParamNameDB, ParamValueDB, ResourceDB


class StoredConfigStore:
    """Queries and mutations the cleaner needs against the stored-configuration database."""

    def __init__(self, db: Session):
        self.db = db

    def find_host(self, name: str) -> Optional[HostDB]:
        return self.db.query(HostDB).filter(HostDB.name == name).first()

    def destroy_host(self, host: HostDB) -> None:
        # Resources and their parameter values go with the host via ON DELETE CASCADE
        try:
            self.db.delete(host)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def exported_resources(self, host: HostDB) -> List[ResourceDB]:
        return (
            self.db.query(ResourceDB)
            .options(selectinload(ResourceDB.param_values).joinedload(ParamValueDB.param_name))
            .filter(ResourceDB.exported.is_(True), ResourceDB.host_id == host.id)
            .order_by(ResourceDB.id)
            .populate_existing()
            .all()
        )

    def find_or_create_param_name(self, name: str) -> ParamNameDB:
        """Return the shared name record for ``name``, creating it if needed.

        Calling this any number of times leaves exactly one record per name. If
        another writer inserts the same name first, the unique constraint
        rejects our insert and the winner's record is returned instead.
        """
        param_name = self.db.query(ParamNameDB).filter(ParamNameDB.name == name).first()
        if param_name:
            return param_name

        param_name = ParamNameDB(name=name)
        self.db.add(param_name)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return self.db.query(ParamNameDB).filter(ParamNameDB.name == name).one()
        return param_name

    def delete_param_value(self, value_id: int) -> None:
        param_value = self.db.get(ParamValueDB, value_id)
        if param_value is None:
            return
        resource = param_value.resource
        if resource is not None and param_value in resource.param_values:
            resource.param_values.remove(param_value)
        self.db.delete(param_value)

    def add_param_value(self, resource: ResourceDB, param_name: ParamNameDB, value: str, line: int) -> ParamValueDB:
        param_value = ParamValueDB(param_name=param_name, value=value, line=line)
        resource.param_values.append(param_value)
        return param_value

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
