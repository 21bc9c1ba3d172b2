"""Kubernetes client wrapper."""

import json
import subprocess
from typing import Any, Dict, List, Optional, Tuple

from ..utils.logger import get_logger

logger = get_logger(__name__)


class K8sClient:
    """Wrapper for kubectl commands."""

    def __init__(self, context: Optional[str] = None, namespace: Optional[str] = None):
        self.context = context
        self.namespace = namespace
        self._verify_kubectl()

    def _verify_kubectl(self):
        """Verify kubectl is available and configured."""
        try:
            subprocess.run(
                ["kubectl", "version", "--client", "-o", "json"],
                capture_output=True,
                text=True,
                check=True,
            )
            logger.debug("kubectl verified successfully")
        except FileNotFoundError:
            raise RuntimeError("kubectl command not found. Please install kubectl.")
        except subprocess.CalledProcessError:
            logger.warning("kubectl verification failed")

    def _build_command(self, args: List[str]) -> List[str]:
        """Build kubectl command with context and namespace."""
        cmd = ["kubectl"]

        if self.context:
            cmd.extend(["--context", self.context])

        cmd.extend(args)

        if self.namespace and "-n" not in args:
            cmd.extend(["-n", self.namespace])

        return cmd

    def execute(self, args: List[str]) -> Tuple[bool, str]:
        """Execute kubectl command and return success status and output."""
        cmd = self._build_command(args)
        logger.debug(f"Executing: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=True)
            return True, result.stdout
        except subprocess.CalledProcessError as e:
            logger.error(f"Command failed: {e.stderr}")
            return False, e.stderr

    def get_json(
        self,
        resource_type: str,
        name: Optional[str] = None,
        label_selector: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """Get resource(s) as JSON."""
        args = ["get", resource_type]

        if name:
            args.append(name)

        if label_selector:
            args.extend(["-l", label_selector])

        args.extend(["-o", "json"])

        success, output = self.execute(args)
        if success:
            try:
                return json.loads(output)
            except json.JSONDecodeError:
                logger.error("Failed to parse JSON output")
                return None
        return None
