"""
Application Tracking Service Interface
Retrieves and filters applications for candidates and employers
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Union
from uuid import UUID

from jobmatch.domain.entities import Application
from jobmatch.domain.enums import ApplicationStatus


class IApplicationTrackingService(ABC):
    """Application tracking service interface"""

    @abstractmethod
    async def get_application(self, application_id: Union[UUID, str]) -> Application:
        """
        Get detailed application info

        Args:
            application_id: Application ID

        Returns:
            Application entity with notes and interviews

        Raises:
            ApplicationNotFoundException
        """
        pass

    @abstractmethod
    async def get_applications_for_job(
        self,
        job_id: Union[UUID, str],
        status: Optional[Union[ApplicationStatus, str]] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[Application]:
        """
        Get applications received by a job, newest first

        Raises:
            JobNotFoundException
        """
        pass

    @abstractmethod
    async def get_applicant_applications(
        self,
        applicant_id: Union[UUID, str],
        status: Optional[Union[ApplicationStatus, str]] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[Application]:
        """Get a candidate's applications, newest first"""
        pass

    @abstractmethod
    async def get_company_application_stats(self, company_id: Union[UUID, str]) -> Dict[str, int]:
        """
        Get application statistics for a company

        Returns:
            Dict with 'total' and a count for every status
        """
        pass

    @abstractmethod
    async def get_employer_application_stats(self, employer_id: Union[UUID, str]) -> Dict[str, int]:
        """Same shape as get_company_application_stats, over the jobs an employer posted"""
        pass
