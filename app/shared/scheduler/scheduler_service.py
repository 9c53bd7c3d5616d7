# -*- coding: utf-8 -*-
"""
backend/app/shared/scheduler/scheduler_service.py

Servicio de tareas periódicas sobre APScheduler (AsyncIOScheduler).

Autor: CourseHub
Fecha: 2026-09-03
"""

import logging
from typing import Optional, Callable
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.executors.asyncio import AsyncIOExecutor

logger = logging.getLogger(__name__)


class SchedulerService:
    """
    Envoltorio delgado de AsyncIOScheduler.

    - Jobs en memoria (un proceso = un scheduler)
    - coalesce + max_instances=1: una ejecución a la vez por job
    """

    def __init__(self):
        self._scheduler = AsyncIOScheduler(
            jobstores={"default": MemoryJobStore()},
            executors={"default": AsyncIOExecutor()},
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": 30,
            },
            timezone="UTC",
        )
        self._started = False
        logger.info("SchedulerService inicializado")

    def start(self):
        if not self._started:
            self._scheduler.start()
            self._started = True
            logger.info("SchedulerService iniciado")

    def shutdown(self, wait: bool = True):
        """
        Detiene el scheduler.

        Args:
            wait: Si True, espera a que terminen los jobs en ejecución
        """
        if self._started:
            self._scheduler.shutdown(wait=wait)
            self._started = False
            logger.info("SchedulerService detenido")

    def add_interval_job(
        self,
        func: Callable,
        job_id: str,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        **kwargs
    ) -> str:
        """
        Agrega (o reemplaza) un job que se ejecuta a intervalos regulares.

        Args:
            func: Corrutina o función a ejecutar
            job_id: ID único del job
            hours / minutes / seconds: Intervalo
            **kwargs: Argumentos para func

        Returns:
            ID del job agregado
        """
        trigger = IntervalTrigger(hours=hours, minutes=minutes, seconds=seconds)

        self._scheduler.add_job(
            func=func,
            trigger=trigger,
            id=job_id,
            name=job_id,
            replace_existing=True,
            kwargs=kwargs,
        )

        logger.info(f"Job '{job_id}' agregado: cada {hours}h {minutes}m {seconds}s")
        return job_id

    def remove_job(self, job_id: str) -> bool:
        """Elimina un job; False si no existía."""
        if self._scheduler.get_job(job_id) is None:
            logger.warning(f"Job '{job_id}' no existe")
            return False
        self._scheduler.remove_job(job_id)
        logger.info(f"Job '{job_id}' eliminado")
        return True

    def get_jobs(self) -> list:
        return [
            {
                "id": job.id,
                "name": job.name,
                "next_run": job.next_run_time,
                "trigger": str(job.trigger),
            }
            for job in self._scheduler.get_jobs()
        ]

    @property
    def is_running(self) -> bool:
        return self._started and self._scheduler.running


# Singleton global del scheduler
_scheduler_instance: Optional[SchedulerService] = None


def get_scheduler() -> SchedulerService:
    """Obtiene la instancia global del scheduler (singleton)."""
    global _scheduler_instance
    if _scheduler_instance is None:
        _scheduler_instance = SchedulerService()
    return _scheduler_instance


# Fin del archivo backend/app/shared/scheduler/scheduler_service.py
