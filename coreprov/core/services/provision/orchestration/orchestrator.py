"""
L5 Orchestration — Top-level provisioning operations.

Ties detection, template expansion and the fallback downloader
together for the two user-facing operations:

  - ``generate_urls``: build the canonical mirror-then-upstream list
    and hand it back as editable text (optionally saving it).
  - ``download_and_install``: expand the configured templates and
    install the first candidate that downloads.

Per call: Start → ResolvingInputs → TemplatesExpanded | ExpansionFailed
→ Downloading → Installed | AllFailed. Nothing is kept between calls;
settings are re-read from the store every time.
"""

from __future__ import annotations

import logging
from pathlib import Path

from coreprov.adapters.process import ProcessRunner, SubprocessRunner
from coreprov.core.config.store import ConfigStore
from coreprov.core.models.provision import (
    ArchDetection,
    CoreStatus,
    ProvisioningResult,
    VersionResolution,
)
from coreprov.core.models.settings import ProvisionerSettings
from coreprov.core.services.provision.detection.arch import detect_arch
from coreprov.core.services.provision.detection.version import (
    get_installed_version,
    resolve_latest_version,
)
from coreprov.core.services.provision.domain.templates import (
    TemplateExpansionError,
    build_default_templates,
    expand_templates,
    parse_templates,
    render_templates,
    uses_placeholders,
)
from coreprov.core.services.provision.execution.download import install_first_available

logger = logging.getLogger(__name__)


class Provisioner:
    """Entry point for the provisioning engine.

    Args:
        store: Config store holding settings and the ``download_urls``
            template text.
        runner: Process runner for every external command. Defaults to
            a real ``SubprocessRunner``.
    """

    def __init__(
        self,
        store: ConfigStore,
        runner: ProcessRunner | None = None,
    ):
        self.store = store
        self.runner: ProcessRunner = runner or SubprocessRunner()

    def settings(self) -> ProvisionerSettings:
        return self.store.load()

    # ── Inputs ──────────────────────────────────────────────────

    async def resolve_version(self, settings: ProvisionerSettings) -> VersionResolution:
        return await resolve_latest_version(
            self.runner,
            settings.release_api_url,
            wget_path=settings.wget_path,
            timeout=settings.query_timeout,
        )

    async def detect_arch(self, settings: ProvisionerSettings) -> ArchDetection:
        return await detect_arch(
            self.runner,
            uname_path=settings.uname_path,
            timeout=settings.query_timeout,
        )

    # ── Operations ──────────────────────────────────────────────

    async def generate_urls(self, *, save: bool = False) -> ProvisioningResult:
        """Build the canonical candidate list from the live release data.

        The list is returned for review rather than installed. With
        ``save=True`` it is also written to the config store.
        """
        settings = self.settings()
        version = await self.resolve_version(settings)
        arch = await self.detect_arch(settings)

        result = ProvisioningResult(
            status="generated",
            arch=arch.arch,
            version=version.tag,
            candidates=build_default_templates(settings, arch.arch, version.tag),
        )
        _note_degraded(result, arch)
        if not version.resolved:
            result.status = "version_unresolved"
            result.add_message(
                "Failed to get latest version from upstream; only the mirror URL was generated"
            )

        if save:
            self.store.set_download_urls(render_templates(result.candidates))
            result.add_message(f"Download URLs saved to {self.store.path}")

        logger.info("Generated %d download URL(s) for %s", len(result.candidates), arch.arch)
        return result.finish()

    async def download_and_install(self, template_text: str | None = None) -> ProvisioningResult:
        """Expand the configured templates and install the first candidate.

        Args:
            template_text: Use this text instead of the stored
                ``download_urls``.
        """
        settings = self.settings()
        text = settings.download_urls if template_text is None else template_text
        lines = parse_templates(text)
        install_path = Path(settings.install_path)

        version: VersionResolution | None = None
        arch: ArchDetection | None = None
        if uses_placeholders(lines):
            version = await self.resolve_version(settings)
            arch = await self.detect_arch(settings)
            try:
                candidates = expand_templates(lines, version.tag, arch.arch)
            except TemplateExpansionError as e:
                logger.error("Cannot expand download URL templates: %s", e)
                result = ProvisioningResult(
                    status="expansion_failed",
                    path=str(install_path),
                    arch=arch.arch,
                )
                result.add_message(str(e))
                _note_degraded(result, arch)
                return result.finish()
        else:
            candidates = lines

        result = await install_first_available(
            candidates,
            install_path,
            runner=self.runner,
            wget_path=settings.wget_path,
            staging_dir=Path(settings.staging_dir) if settings.staging_dir else None,
            timeout=settings.download_timeout,
        )
        if arch is not None:
            result.arch = arch.arch
            _note_degraded(result, arch)
        if version is not None:
            result.version = version.tag
        return result

    async def status(self) -> CoreStatus:
        """Installed-core version query, for the status display."""
        settings = self.settings()
        return await get_installed_version(
            self.runner,
            settings.install_path,
            timeout=settings.query_timeout,
        )


def _note_degraded(result: ProvisioningResult, arch: ArchDetection) -> None:
    """Surface an x86_64 fallback so a masked detection failure is visible."""
    if arch.degraded:
        result.add_message(f"Architecture detection degraded, using {arch.arch}: {arch.reason}")
