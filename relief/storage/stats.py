"""Dashboard counts over the record store."""

from relief.data_models.records import StoreStats, VerificationStatus
from relief.storage.contract import RecordStore
from relief.utils.timestamps import Clock, as_utc, utc_now


async def collect_stats(store: RecordStore, clock: Clock = utc_now) -> StoreStats:
    """Count disasters, reports (all and verified) and resources.

    Every stored disaster counts as active; there is no closed state.
    """
    disasters = await store.get_disasters()
    reports = await store.get_reports()
    resources = await store.get_resources()
    return StoreStats(
        active_disasters=len(disasters),
        total_reports=len(reports),
        verified_reports=sum(
            1 for r in reports if r.verification_status == VerificationStatus.VERIFIED
        ),
        total_resources=len(resources),
        last_updated=as_utc(clock()),
    )
