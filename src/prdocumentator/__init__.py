"""
PR Documentator: keeps a Postman collection in sync with pull requests.

A pull-request diff is sent to Claude, which reports the API routes that were
added, modified or removed. Those route changes are then reconciled into the
team's Postman collection: new routes become new requests, modified routes
replace their existing request, and removed routes are tagged as deprecated
rather than deleted.

Example:
    from prdocumentator.services import AnalyzerService

    async with AnalyzerService.from_config(config) as analyzer:
        result = await analyzer.analyze_diff(diff_text)
        print(result.postman_update.items_added)
"""

from prdocumentator.version import __version__

__all__ = [
    "__version__",
]
