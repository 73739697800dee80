"""
Client Service - a trainer's client roster.

Roster entries link a trainer to an already-registered user. The progress
summary shown next to each client is recomputed from UserProgress on every
read.
"""
from .base import (
    HTTPException, uuid, logging, datetime,
    get_db_session, UserORM, TrainerClientORM, UserProgressORM,
    AIGeneratedWorkoutORM, user_to_dict
)
from .progress_service import progress_service
from .ai_workout_service import ai_workout_service

logger = logging.getLogger("stheneco")

CLIENT_STATUSES = ("active", "inactive", "pending")
EMPTY_PROGRESS = {"progress_score": 0, "last_workout": "", "total_workouts": 0}


class ClientService:
    """Service for managing a trainer's clients."""

    def _progress_summary(self, db, client_id: str) -> dict:
        rows = db.query(UserProgressORM.form_score, UserProgressORM.completed_at).filter(
            UserProgressORM.user_id == client_id
        ).order_by(UserProgressORM.completed_at.desc()).all()
        if not rows:
            return dict(EMPTY_PROGRESS)

        scores = [score or 0 for score, _ in rows]
        return {
            "progress_score": round(sum(scores) / len(scores)),
            "last_workout": rows[0][1] or "",
            "total_workouts": len(rows),
        }

    def _relationship_to_dict(self, rel: TrainerClientORM, client: UserORM, progress: dict) -> dict:
        return {
            "id": rel.id,
            "trainer_id": rel.trainer_id,
            "client_id": rel.client_id,
            "status": rel.status,
            "created_at": rel.created_at,
            "client": {
                "id": client.id,
                "name": client.name,
                "email": client.email,
                "avatar_url": client.avatar_url,
                "fitness_level": client.fitness_level,
                "subscription_tier": client.subscription_tier or "free",
            } if client else None,
            **progress,
        }

    # --- ROSTER ---

    def get_trainer_clients(self, trainer_id: str, search: str = None, status: str = None) -> list:
        db = get_db_session()
        try:
            query = db.query(TrainerClientORM, UserORM).join(
                UserORM, UserORM.id == TrainerClientORM.client_id
            ).filter(TrainerClientORM.trainer_id == trainer_id)

            if status and status != "all":
                query = query.filter(TrainerClientORM.status == status)

            rows = query.order_by(TrainerClientORM.created_at.desc()).all()

            needle = (search or "").strip().lower()
            result = []
            for rel, client in rows:
                if needle and needle not in (client.name or "").lower() and needle not in client.email.lower():
                    continue
                result.append(self._relationship_to_dict(rel, client, self._progress_summary(db, client.id)))
            return result
        finally:
            db.close()

    def search_user_by_email(self, email: str):
        db = get_db_session()
        try:
            user = db.query(UserORM).filter(UserORM.email == (email or "").strip().lower()).first()
            if not user:
                return None
            return {"id": user.id, "name": user.name, "email": user.email, "user_role": user.user_role}
        finally:
            db.close()

    def is_client_of(self, trainer_id: str, client_id: str) -> bool:
        db = get_db_session()
        try:
            return db.query(TrainerClientORM).filter(
                TrainerClientORM.trainer_id == trainer_id,
                TrainerClientORM.client_id == client_id
            ).first() is not None
        finally:
            db.close()

    def add_client(self, trainer_id: str, email: str) -> dict:
        email = (email or "").strip().lower()
        if not email:
            raise HTTPException(status_code=400, detail="Client email is required")

        db = get_db_session()
        try:
            client = db.query(UserORM).filter(UserORM.email == email).first()
            if not client:
                raise HTTPException(
                    status_code=404,
                    detail="User with this email does not exist. They need to register first."
                )
            if client.id == trainer_id:
                raise HTTPException(status_code=400, detail="You cannot add yourself as a client.")

            existing = db.query(TrainerClientORM).filter(
                TrainerClientORM.trainer_id == trainer_id,
                TrainerClientORM.client_id == client.id
            ).first()
            if existing:
                raise HTTPException(status_code=400, detail="This user is already your client.")

            rel = TrainerClientORM(
                id=str(uuid.uuid4()),
                trainer_id=trainer_id,
                client_id=client.id,
                status="active",
                created_at=datetime.utcnow().isoformat()
            )
            db.add(rel)
            db.commit()
            db.refresh(rel)
            logger.info(f"Trainer {trainer_id} added client {client.id}")
            return self._relationship_to_dict(rel, client, dict(EMPTY_PROGRESS))
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to add client {email} for {trainer_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to add client: {str(e)}")
        finally:
            db.close()

    def _get_own_relationship(self, db, trainer_id: str, relationship_id: str) -> TrainerClientORM:
        rel = db.query(TrainerClientORM).filter(
            TrainerClientORM.id == relationship_id,
            TrainerClientORM.trainer_id == trainer_id
        ).first()
        if not rel:
            raise HTTPException(status_code=404, detail="Client relationship not found")
        return rel

    def update_client_status(self, trainer_id: str, relationship_id: str, status: str) -> dict:
        if status not in CLIENT_STATUSES:
            raise HTTPException(status_code=400, detail=f"Invalid status. Must be one of: {', '.join(CLIENT_STATUSES)}")

        db = get_db_session()
        try:
            rel = self._get_own_relationship(db, trainer_id, relationship_id)
            rel.status = status
            db.commit()
            return {"status": "success", "id": rel.id, "client_status": status}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to update client status: {str(e)}")
        finally:
            db.close()

    def remove_client(self, trainer_id: str, relationship_id: str) -> dict:
        db = get_db_session()
        try:
            rel = self._get_own_relationship(db, trainer_id, relationship_id)
            db.delete(rel)
            db.commit()
            logger.info(f"Trainer {trainer_id} removed client relationship {relationship_id}")
            return {"status": "success", "message": "Client removed"}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to remove client: {str(e)}")
        finally:
            db.close()

    # --- DETAILS & DASHBOARD ---

    def get_client_details(self, trainer_id: str, client_id: str) -> dict:
        if not self.is_client_of(trainer_id, client_id):
            raise HTTPException(status_code=404, detail="Client not found")

        db = get_db_session()
        try:
            client = db.query(UserORM).filter(UserORM.id == client_id).first()
            if not client:
                raise HTTPException(status_code=404, detail="Client not found")
            user = user_to_dict(client)
        finally:
            db.close()

        return {
            "user": user,
            "progress": progress_service.get_user_progress(client_id, limit=10),
            "aiWorkouts": ai_workout_service.get_user_workouts(client_id, limit=5),
        }

    def get_dashboard_stats(self, trainer_id: str) -> dict:
        clients = self.get_trainer_clients(trainer_id)
        db = get_db_session()
        try:
            authored = db.query(AIGeneratedWorkoutORM).filter(
                AIGeneratedWorkoutORM.trainer_id == trainer_id
            ).count()
        finally:
            db.close()

        scores = [c["progress_score"] for c in clients]
        return {
            "totalClients": len(clients),
            "activeClients": len([c for c in clients if c["status"] == "active"]),
            "averageProgress": round(sum(scores) / len(scores)) if scores else 0,
            "aiWorkoutsCreated": authored,
        }


# Singleton instance
client_service = ClientService()

def get_client_service() -> ClientService:
    """Dependency injection helper."""
    return client_service
