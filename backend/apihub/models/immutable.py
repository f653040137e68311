from sqlalchemy import event


def make_append_only(model, label: str) -> None:
    """Reject ORM updates and deletes of an append-only model."""

    @event.listens_for(model, "before_update")
    @event.listens_for(model, "before_delete")
    def prevent_mutation(mapper, connection, target):
        raise RuntimeError(f"{label} are immutable")
