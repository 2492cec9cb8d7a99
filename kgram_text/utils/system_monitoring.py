#!/usr/bin/env python3
"""
System Monitoring Module

Reports process resource usage (memory and CPU) so that long model builds can
be attributed a cost in the structured logs.
"""

import os
import threading
import psutil
from datetime import datetime


class ResourceMonitor:
    """
    Collects resource usage figures for the current process.
    """

    def __init__(self, logger):
        """
        Initialize the resource monitor.

        Args:
            logger: Logger instance for recording resource metrics
        """
        self.logger = logger
        self.process = psutil.Process(os.getpid())
        self.total_system_memory_mb = psutil.virtual_memory().total / (1024 * 1024)

    def get_memory_usage(self):
        """
        Get current process memory usage.

        Returns:
            dict: Resident memory in MB and as a percentage of system memory
        """
        current_memory_mb = self.process.memory_info().rss / (1024 * 1024)
        return {
            "current_mb": current_memory_mb,
            "percent_used": (current_memory_mb / self.total_system_memory_mb) * 100,
            "system_percent_used": psutil.virtual_memory().percent
        }

    def get_resource_usage(self):
        """
        Get resource usage statistics.

        Returns:
            dict: Resource usage metrics for CPU, memory and threads
        """
        # Process CPU time since start, not a sampled percentage, so the call never blocks
        cpu_times = self.process.cpu_times()

        return {
            "timestamp": datetime.now().isoformat(),
            "memory": self.get_memory_usage(),
            "cpu": {
                "user_seconds": cpu_times.user,
                "system_seconds": cpu_times.system,
                "logical_cores": psutil.cpu_count(logical=True)
            },
            "threads": threading.active_count(),
            "process_id": os.getpid()
        }

    def log_resource_usage(self, operation):
        """
        Log current resource usage for a named operation.

        Args:
            operation (str): Name of the operation the figures belong to
        """
        usage = self.get_resource_usage()
        self.logger.info(f"Resource usage after {operation}", extra={
            "metrics": {"operation": operation, "system": usage}
        })
        return usage
