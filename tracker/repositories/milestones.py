from tracker.database import models
from tracker.repositories.base import CrudRepository
from tracker.schemas import MilestoneCreate, MilestoneUpdate


class MilestoneRepository(CrudRepository):
    model = models.Milestone
    create_schema = MilestoneCreate
    update_schema = MilestoneUpdate
    entity_name = "Milestone"
    filter_fields = ("status",)
    required_fields = frozenset({"title", "status"})
