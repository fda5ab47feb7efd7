# cf_deploy/models/manifest.py
"""Manifest models (the versions.json contract)"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any


@dataclass
class GitInfo:
    """Git provenance attached to a release"""
    commit_sha: str  # Short hash
    commit_full: str
    commit_message: str
    branch: str
    commit_url: str = ""

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary"""
        return {
            'commitSha': self.commit_sha,
            'commitFull': self.commit_full,
            'commitMessage': self.commit_message,
            'branch': self.branch,
            'commitUrl': self.commit_url
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GitInfo':
        """Create from dictionary"""
        return cls(
            commit_sha=data.get('commitSha', ''),
            commit_full=data.get('commitFull', ''),
            commit_message=data.get('commitMessage', ''),
            branch=data.get('branch', ''),
            commit_url=data.get('commitUrl', '')
        )


@dataclass
class Release:
    """A `v<version>` tagged upload"""
    version: str
    tag: str
    date: str
    version_id: str  # Empty for a placeholder that was never uploaded
    url: str  # Alias URL, stable across re-uploads of the same version
    preview_url: str = ""  # Immutable URL of this exact upload
    healthy: Optional[bool] = None
    git: Optional[GitInfo] = None
    command_count: Optional[int] = None

    @property
    def is_uploaded(self) -> bool:
        """Check if the release has a platform version id"""
        return bool(self.version_id)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            'version': self.version,
            'tag': self.tag,
            'date': self.date,
            'versionId': self.version_id,
            'url': self.url,
            'previewUrl': self.preview_url
        }

        if self.healthy is not None:
            data['healthy'] = self.healthy

        if self.git:
            data['git'] = self.git.to_dict()

        if self.command_count is not None:
            data['commandCount'] = self.command_count

        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Release':
        """Create from dictionary"""
        git = data.get('git')
        return cls(
            version=data['version'],
            tag=data.get('tag', f"v{data['version']}"),
            date=data.get('date', ''),
            version_id=data.get('versionId', ''),
            url=data.get('url', ''),
            preview_url=data.get('previewUrl', ''),
            healthy=data.get('healthy'),
            git=GitInfo.from_dict(git) if git else None,
            command_count=data.get('commandCount')
        )


@dataclass
class Preview:
    """A `pr-<n>` tagged upload"""
    label: str
    tag: str
    date: str
    version_id: str
    url: str
    healthy: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            'label': self.label,
            'tag': self.tag,
            'date': self.date,
            'versionId': self.version_id,
            'url': self.url
        }
        if self.healthy is not None:
            data['healthy'] = self.healthy
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Preview':
        """Create from dictionary"""
        return cls(
            label=data.get('label', ''),
            tag=data['tag'],
            date=data.get('date', ''),
            version_id=data.get('versionId', ''),
            url=data.get('url', ''),
            healthy=data.get('healthy')
        )


@dataclass
class VersionsJson:
    """Manifest root"""
    production: str
    github: str
    generated: str
    versions: List[Release] = field(default_factory=list)
    previews: List[Preview] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'production': self.production,
            'github': self.github,
            'generated': self.generated,
            'versions': [r.to_dict() for r in self.versions],
            'previews': [p.to_dict() for p in self.previews]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VersionsJson':
        """Create from dictionary"""
        return cls(
            production=data.get('production', ''),
            github=data.get('github', ''),
            generated=data.get('generated', ''),
            versions=[Release.from_dict(r) for r in data.get('versions', [])],
            previews=[Preview.from_dict(p) for p in data.get('previews', [])]
        )

    @property
    def latest(self) -> Optional[Release]:
        """Highest-sorted release"""
        return self.versions[0] if self.versions else None

    def find_release(self, version: str) -> Optional[Release]:
        """Find release by exact version string"""
        for release in self.versions:
            if release.version == version:
                return release
        return None

    def uploaded_releases(self) -> List[Release]:
        """Releases that have a platform version id, in manifest order"""
        return [r for r in self.versions if r.is_uploaded]

    def get_tags(self) -> List[str]:
        """Release tags in manifest order"""
        return [r.tag for r in self.versions]
