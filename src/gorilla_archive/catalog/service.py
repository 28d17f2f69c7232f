"""Catalog service.

Sorting, searching and grouping of the static update list, plus the
download action for a single update.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from gorilla_archive.core.base import BaseService
from gorilla_archive.core.exceptions import NotFoundError, ValidationError
from gorilla_archive.core.monitoring import track_download
from gorilla_archive.models.catalog import (
    CatalogView,
    DownloadAction,
    DownloadKind,
    DownloadType,
    Notification,
    NotificationType,
    Update,
    YearGroup,
)
from .expansion import YearExpansion
from .scripts import generate_batch_script, script_filename

# Group for updates that carry no year.
DEFAULT_YEAR = 2025


class CatalogService(BaseService):
    """Read-only access to the update list."""

    def __init__(self, updates: Iterable[Update], steam_app_id: str, steam_depot_id: str) -> None:
        """Initialize the catalog.

        Args:
            updates: Update records in fixture order.
            steam_app_id: Steam application ID used in generated scripts.
            steam_depot_id: Steam depot ID used in generated scripts.
        """
        super().__init__()
        # Newest year first; missing years sort last. The sort is stable.
        self._updates = sorted(updates, key=lambda u: u.year or 0, reverse=True)
        self._by_id: Dict[str, Update] = {update.id: update for update in self._updates}
        self.steam_app_id = steam_app_id
        self.steam_depot_id = steam_depot_id

    def list_updates(self) -> List[Update]:
        return list(self._updates)

    def search(self, query: Optional[str] = None) -> List[Update]:
        """Filter updates by case-insensitive substring.

        Matches against name, version and manifest ID. An empty query
        returns every update.
        """
        if not query:
            return self.list_updates()

        needle = query.lower()
        return [
            update for update in self._updates
            if needle in update.name.lower()
            or (update.version and needle in update.version.lower())
            or (update.manifest_id and needle in update.manifest_id.lower())
        ]

    def group_by_year(self, updates: Iterable[Update]) -> List[Tuple[int, List[Update]]]:
        """Group updates by year, newest year first."""
        grouped: Dict[int, List[Update]] = {}
        for update in updates:
            grouped.setdefault(update.year or DEFAULT_YEAR, []).append(update)
        return sorted(grouped.items(), key=lambda item: item[0], reverse=True)

    def build_view(
        self,
        query: Optional[str] = None,
        expanded: Optional[Iterable[int]] = None,
        expand: Optional[str] = None,
        toggle: Optional[int] = None,
        auto_expand: bool = True,
    ) -> CatalogView:
        """Build the grouped catalog view.

        Args:
            query: Search query.
            expanded: Years the caller has expanded.
            expand: "all" to expand every shown year, "none" to collapse all.
            toggle: Year to flip after the state above is applied.
            auto_expand: Preference used when expanded is not given.

        Returns:
            CatalogView: Filtered groups with their expansion flags.
        """
        groups = self.group_by_year(self.search(query))

        if expanded is not None:
            expansion = YearExpansion(expanded)
        else:
            expansion = YearExpansion.initial(auto_expand)

        if expand == "all":
            expansion.expand_all(year for year, _ in groups)
        elif expand == "none":
            expansion.collapse_all()
        if toggle is not None:
            expansion.toggle(toggle)

        empty_message = None
        if not groups:
            empty_message = "No versions match your search" if query else "No versions available"

        return CatalogView(
            query=query or "",
            total_versions=len(self._updates),
            year_count=len(groups),
            groups=[
                YearGroup(
                    year=year,
                    count=len(updates),
                    expanded=expansion.is_expanded(year),
                    updates=updates,
                )
                for year, updates in groups
            ],
            expanded_years=sorted(expansion.expanded, reverse=True),
            empty_message=empty_message,
        )

    def get_update(self, update_id: str) -> Update:
        """Look up one update.

        Raises:
            NotFoundError: If no update has this ID.
        """
        try:
            return self._by_id[update_id]
        except KeyError:
            raise NotFoundError("Update", update_id) from None

    def render_script(self, update_id: str) -> Tuple[str, str]:
        """Return ``(filename, script text)`` for a Steam-depot update."""
        update = self.get_update(update_id)
        script = generate_batch_script(update, self.steam_app_id, self.steam_depot_id)
        return script_filename(update), script

    def download_action(self, update_id: str, script_url: Optional[str] = None) -> DownloadAction:
        """Resolve how an update is downloaded.

        Steam-depot updates get a generated script; link updates get their URL.

        Args:
            update_id: Update identifier.
            script_url: URL the generated script is served from.

        Raises:
            NotFoundError: If no update has this ID.
            ValidationError: If the update has nothing to download.
        """
        update = self.get_update(update_id)

        if update.download_type == DownloadType.STEAM_DEPOT.value:
            # Validates the manifest ID before promising a script.
            filename, _ = self.render_script(update_id)
            action = DownloadAction(
                kind=DownloadKind.SCRIPT,
                update_id=update.id,
                filename=filename,
                script_url=script_url,
                notification=Notification(
                    message=f"{update.label} - Script ready",
                    type=NotificationType.SUCCESS,
                ),
            )
        elif update.download_url:
            action = DownloadAction(
                kind=DownloadKind.LINK,
                update_id=update.id,
                url=update.download_url,
                notification=Notification(
                    message=f"Opening {update.name}",
                    type=NotificationType.INFO,
                ),
            )
        else:
            raise ValidationError(f"Update '{update.id}' has no download available")

        track_download(update.download_type)
        self.logger.info("Download action served", update_id=update.id, kind=action.kind)
        return action
