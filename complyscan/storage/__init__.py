from complyscan.storage.dual_store import DualReportStore
from complyscan.storage.factory import ReportStoreFactory
from complyscan.storage.models import PrivacyAgreement, Report, SaveOutcome

__all__ = ["DualReportStore", "PrivacyAgreement", "Report", "ReportStoreFactory", "SaveOutcome"]
