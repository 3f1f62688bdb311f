import asyncio
import json
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from video_manager.services.api_client import ManagerClient

logger = logging.getLogger(__name__)

BACKUP_VERSION = "1.0"

KINDS = ("videos", "links", "video_categories", "link_categories")


class InvalidBackupError(ValueError):
    pass


@dataclass
class ImportReport:
    imported: Dict[str, int] = field(default_factory=lambda: dict.fromkeys(KINDS, 0))
    skipped: Dict[str, int] = field(default_factory=lambda: dict.fromkeys(KINDS, 0))

    @property
    def total_imported(self) -> int:
        return sum(self.imported.values())

    @property
    def total_skipped(self) -> int:
        return sum(self.skipped.values())


def _field(record: Dict[str, Any], snake: str, camel: Optional[str] = None, default=None):
    """Read a field written either by this service or by older camelCase exports."""
    if snake in record:
        return record[snake]
    if camel and camel in record:
        return record[camel]
    return default


class BackupService:
    def __init__(self, client: ManagerClient):
        self.client = client

    async def export_data(self) -> Dict[str, Any]:
        """Snapshot of all four collections"""
        videos, categories, links, link_categories = await asyncio.gather(
            self.client.get_videos(),
            self.client.get_categories(),
            self.client.get_links(),
            self.client.get_link_categories(),
        )
        exported_at = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

        return {
            "version": BACKUP_VERSION,
            "exportedAt": exported_at,
            "videos": [v.model_dump(mode="json") for v in videos],
            "videoCategories": [c.model_dump(mode="json") for c in categories],
            "links": [l.model_dump(mode="json") for l in links],
            "linkCategories": [c.model_dump(mode="json") for c in link_categories],
        }

    @staticmethod
    def backup_filename(day: Optional[date] = None) -> str:
        day = day or datetime.now(timezone.utc).date()
        return f"manager-backup-{day.isoformat()}.json"

    async def write_backup(self, directory: str = ".") -> str:
        data = await self.export_data()
        Path(directory).mkdir(parents=True, exist_ok=True)
        path = Path(directory) / self.backup_filename()
        path.write_text(json.dumps(data, indent=2))

        logger.info(
            f"Exported {len(data['videos'])} videos and {len(data['links'])} links to {path}"
        )
        return str(path)

    async def import_file(self, path: str, keep_categories: bool = False) -> ImportReport:
        try:
            data = json.loads(Path(path).read_text())
        except json.JSONDecodeError as e:
            raise InvalidBackupError(f"Invalid backup file format: {e}") from e
        return await self.import_data(data, keep_categories=keep_categories)

    async def import_data(self, data: Any, keep_categories: bool = False) -> ImportReport:
        """Add every record whose URL (or category name) is not present yet.

        Items are imported without a category unless keep_categories is set,
        in which case category references are remapped by name.
        """
        if not isinstance(data, dict) or not data.get("version"):
            raise InvalidBackupError("Invalid backup file format")

        videos, categories, links, link_categories = await asyncio.gather(
            self.client.get_videos(),
            self.client.get_categories(),
            self.client.get_links(),
            self.client.get_link_categories(),
        )
        report = ImportReport()

        video_category_ids = await self._import_categories(
            data.get("videoCategories") or [],
            existing=categories,
            add=self.client.add_category,
            kind="video_categories",
            report=report,
            keep_parents=keep_categories,
        )
        link_category_ids = await self._import_categories(
            data.get("linkCategories") or [],
            existing=link_categories,
            add=self.client.add_link_category,
            kind="link_categories",
            report=report,
            keep_parents=keep_categories,
        )

        video_urls = {v.url for v in videos}
        for record in data.get("videos") or []:
            url = _field(record, "url")
            if not url or url in video_urls:
                report.skipped["videos"] += 1
                continue
            category_id = None
            if keep_categories:
                category_id = video_category_ids.get(_field(record, "category_id", "categoryId"))
            await self.client.add_video(
                url=url,
                title=_field(record, "title", default=url),
                thumbnail_url=_field(record, "thumbnail_url", "thumbnailUrl"),
                description=_field(record, "description"),
                channel_name=_field(record, "channel_name", "channelName"),
                channel_url=_field(record, "channel_url", "channelUrl"),
                category_id=category_id,
                tags=_field(record, "tags", default=[]) or [],
            )
            video_urls.add(url)
            report.imported["videos"] += 1

        link_urls = {l.url for l in links}
        for record in data.get("links") or []:
            url = _field(record, "url")
            if not url or url in link_urls:
                report.skipped["links"] += 1
                continue
            category_id = None
            if keep_categories:
                category_id = link_category_ids.get(_field(record, "category_id", "categoryId"))
            await self.client.add_link(
                url=url,
                title=_field(record, "title", default=url),
                description=_field(record, "description"),
                favicon=_field(record, "favicon"),
                category_id=category_id,
                tags=_field(record, "tags", default=[]) or [],
            )
            link_urls.add(url)
            report.imported["links"] += 1

        logger.info(
            f"Import finished: {report.total_imported} imported, {report.total_skipped} skipped"
        )
        return report

    async def _import_categories(
        self,
        records: List[Dict[str, Any]],
        existing: list,
        add,
        kind: str,
        report: ImportReport,
        keep_parents: bool,
    ) -> Dict[str, str]:
        """Create missing categories; returns backup id -> live id."""
        by_name = {c.name.lower(): c.id for c in existing}
        top_level = {c.id for c in existing if c.parent_id is None}
        id_map: Dict[str, str] = {}

        # Parents before children so parent references can be remapped
        ordered = sorted(records, key=lambda r: _field(r, "parent_id", "parentId") is not None)

        for record in ordered:
            name = (_field(record, "name") or "").strip()
            old_id = _field(record, "id")
            if not name or name.lower() in by_name:
                if name and old_id:
                    id_map[old_id] = by_name[name.lower()]
                report.skipped[kind] += 1
                continue

            parent_id = None
            if keep_parents:
                parent_id = id_map.get(_field(record, "parent_id", "parentId"))
                # Only top-level categories can take children; otherwise import flat
                if parent_id not in top_level:
                    parent_id = None

            category = await add(name, _field(record, "color", default="220 70% 50%"), parent_id)
            by_name[name.lower()] = category.id
            if category.parent_id is None:
                top_level.add(category.id)
            if old_id:
                id_map[old_id] = category.id
            report.imported[kind] += 1

        return id_map
