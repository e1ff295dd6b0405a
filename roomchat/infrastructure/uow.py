# roomchat/infrastructure/uow.py

from typing import Any, Dict, Type


class UoWModel:
    def __init__(self, model: Any, uow: "UnitOfWork"):
        self.__dict__["_model"] = model
        self.__dict__["_uow"] = uow

    def __getattr__(self, key):
        return getattr(self._model, key)

    def __setattr__(self, key, value):
        setattr(self._model, key, value)
        # new models are inserted as a whole on commit, only
        # persisted ones need to be tracked as dirty
        if id(self._model) not in self._uow.new:
            self._uow.register_dirty(self._model)


def unwrap(model: Any) -> Any:
    return model._model if isinstance(model, UoWModel) else model


class UnitOfWork:
    def __init__(self) -> None:
        self.dirty: Dict[int, Any] = {}
        self.new: Dict[int, Any] = {}
        self.deleted: Dict[int, Any] = {}
        self.mappers: Dict[Type, Any] = {}

    def register_dirty(self, model: Any) -> None:
        model = unwrap(model)
        model_id = id(model)
        if model_id not in self.new and model_id not in self.deleted:
            self.dirty[model_id] = model

    def register_deleted(self, model: Any) -> None:
        model = unwrap(model)
        model_id = id(model)
        if model_id in self.new:
            # never reached the database, forgetting it is enough
            self.new.pop(model_id)
            return
        self.dirty.pop(model_id, None)
        self.deleted[model_id] = model

    def register_new(self, model: Any) -> UoWModel:
        model = unwrap(model)
        self.new[id(model)] = model
        return UoWModel(model, self)

    def _mapper_for(self, model: Any):
        try:
            return self.mappers[type(model)]
        except KeyError:
            raise LookupError(f"No data mapper registered for {type(model).__name__}")

    async def commit(self) -> None:
        for model in self.new.values():
            await self._mapper_for(model).insert(model)
        for model in self.dirty.values():
            await self._mapper_for(model).update(model)
        for model in self.deleted.values():
            await self._mapper_for(model).delete(model)

        self.clear()

    def rollback(self) -> None:
        """Forget pending changes; the session rollback is the caller's job."""
        self.clear()

    def clear(self) -> None:
        self.new.clear()
        self.dirty.clear()
        self.deleted.clear()
