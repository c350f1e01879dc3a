"""
psutil-backed performance counter registry
Copyright (C) 2024  Akshat Kotpalliwar

This library is free software; you can redistribute it and/or
modify it under the terms of the GNU Lesser General Public
License as published by the Free Software Foundation; either
version 2.1 of the License, or (at your option) any later version.

This library is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
Lesser General Public License for more details.

You should have received a copy of the GNU Lesser General Public
License along with this library; if not, see <https://www.gnu.org/licenses/>.

Categories, counters and instance names follow the Windows performance
counter naming so existing polling scripts keep working on any platform
psutil supports. Instance lists are read live on every lookup.
"""

import logging
import mmap
import time

import psutil

from .errors import CategoryNotFoundError, CounterNotFoundError, InstanceNotFoundError
from .registry import CounterCategory, CounterSample, PerformanceCounter, gauge, rate, timer

logger = logging.getLogger(__name__)

TOTAL_INSTANCE = '_Total'

# Windows reports processor time in 100 ns ticks
TICKS_PER_SECOND = 10_000_000


class CounterUnavailable(LookupError):
    """The host has no data for a counter or instance right now."""


def _is_total(instance):
    return not instance or instance.casefold() == TOTAL_INSTANCE.casefold()


def _ticks(seconds):
    return int(seconds * TICKS_PER_SECOND)


# Processor

def _processor_instances():
    return [TOTAL_INSTANCE] + [str(index) for index in range(len(psutil.cpu_times(percpu=True)))]


def _cpu_times(instance):
    if _is_total(instance):
        return psutil.cpu_times()
    per_cpu = psutil.cpu_times(percpu=True)
    try:
        return per_cpu[int(instance)]
    except (ValueError, IndexError):
        raise CounterUnavailable(f"no processor {instance}") from None


def _cpu_total(times):
    # guest time is already included in user time on Linux
    return sum(times) - getattr(times, 'guest', 0.0) - getattr(times, 'guest_nice', 0.0)


def _cpu_idle(times):
    return times.idle + getattr(times, 'iowait', 0.0)


def _cpu_interrupt(times):
    return (getattr(times, 'irq', 0.0) + getattr(times, 'softirq', 0.0)
            + getattr(times, 'interrupt', 0.0) + getattr(times, 'dpc', 0.0))


def _processor_timer(part):
    def sampler(instance):
        times = _cpu_times(instance)
        return CounterSample(_ticks(part(times)), _ticks(_cpu_total(times)))
    return sampler


def processor_category():
    return CounterCategory('Processor', [
        timer('% Processor Time', _processor_timer(lambda t: _cpu_total(t) - _cpu_idle(t))),
        timer('% User Time', _processor_timer(lambda t: t.user)),
        timer('% Privileged Time', _processor_timer(lambda t: t.system)),
        timer('% Idle Time', _processor_timer(_cpu_idle)),
        timer('% Interrupt Time', _processor_timer(_cpu_interrupt)),
    ], _processor_instances)


# Memory

def _available(instance):
    return psutil.virtual_memory().available


def memory_category():
    return CounterCategory('Memory', [
        gauge('Available Bytes', _available),
        gauge('Available KBytes', lambda instance: _available(instance) // 1024),
        gauge('Available MBytes', lambda instance: _available(instance) // (1024 * 1024)),
        gauge('Committed Bytes', lambda instance: psutil.virtual_memory().used),
        gauge('% Committed Bytes In Use', lambda instance: psutil.virtual_memory().percent),
        rate('Pages Input/sec', lambda instance: psutil.swap_memory().sin // mmap.PAGESIZE),
        rate('Pages Output/sec', lambda instance: psutil.swap_memory().sout // mmap.PAGESIZE),
    ])


# PhysicalDisk

def _per_disk():
    return psutil.disk_io_counters(perdisk=True) or {}


def _disk_instances():
    return [TOTAL_INSTANCE] + sorted(_per_disk())


def _disk_counters(instance):
    if _is_total(instance):
        counters = psutil.disk_io_counters(perdisk=False)
    else:
        counters = _per_disk().get(instance)
    if counters is None:
        raise CounterUnavailable(f"no disk statistics for {instance or TOTAL_INSTANCE}")
    return counters


def _disk_field(*fields):
    def read(instance):
        counters = _disk_counters(instance)
        return sum(getattr(counters, field) for field in fields)
    return read


def _disk_time_sample(instance):
    counters = _disk_counters(instance)
    busy_ms = getattr(counters, 'busy_time', None)
    if busy_ms is None:
        busy_ms = counters.read_time + counters.write_time
    return CounterSample(busy_ms, time.monotonic() * 1000.0)


def physical_disk_category():
    return CounterCategory('PhysicalDisk', [
        rate('Disk Reads/sec', _disk_field('read_count')),
        rate('Disk Writes/sec', _disk_field('write_count')),
        rate('Disk Read Bytes/sec', _disk_field('read_bytes')),
        rate('Disk Write Bytes/sec', _disk_field('write_bytes')),
        rate('Disk Bytes/sec', _disk_field('read_bytes', 'write_bytes')),
        timer('% Disk Time', _disk_time_sample),
    ], _disk_instances)


# Network Interface

def _per_nic():
    return psutil.net_io_counters(pernic=True) or {}


def _nic_instances():
    return sorted(_per_nic())


def _nic_field(*fields):
    def read(instance):
        if instance:
            counters = _per_nic().get(instance)
        else:
            counters = psutil.net_io_counters(pernic=False)
        if counters is None:
            raise CounterUnavailable(f"no network statistics for {instance or 'any interface'}")
        return sum(getattr(counters, field) for field in fields)
    return read


def network_interface_category():
    return CounterCategory('Network Interface', [
        rate('Bytes Received/sec', _nic_field('bytes_recv')),
        rate('Bytes Sent/sec', _nic_field('bytes_sent')),
        rate('Bytes Total/sec', _nic_field('bytes_recv', 'bytes_sent')),
        rate('Packets Received/sec', _nic_field('packets_recv')),
        rate('Packets Sent/sec', _nic_field('packets_sent')),
        gauge('Packets Received Errors', _nic_field('errin')),
        gauge('Packets Outbound Errors', _nic_field('errout')),
    ], _nic_instances)


# System

def system_category():
    return CounterCategory('System', [
        gauge('Processes', lambda instance: len(psutil.pids())),
        gauge('System Up Time', lambda instance: time.time() - psutil.boot_time()),
        rate('Context Switches/sec', lambda instance: psutil.cpu_stats().ctx_switches),
        rate('System Calls/sec', lambda instance: psutil.cpu_stats().syscalls),
    ])


# Process

def _process_table():
    """Map instance names to pids; repeated names get "#1", "#2"... by pid."""
    table = {}
    seen = {}
    for proc in sorted(psutil.process_iter(['name']), key=lambda p: p.pid):
        name = proc.info.get('name') or str(proc.pid)
        if name.lower().endswith('.exe'):
            name = name[:-4]
        count = seen.get(name.casefold(), 0)
        seen[name.casefold()] = count + 1
        table[name if count == 0 else f"{name}#{count}"] = proc.pid
    return table


def _process_instances():
    return list(_process_table())


def _process_reader(read):
    def reader(instance):
        if not instance:
            raise CounterUnavailable("an instance is required for the Process category")
        pid = _process_table().get(instance)
        if pid is None:
            raise CounterUnavailable(f"process {instance} is no longer running")
        try:
            return read(psutil.Process(pid))
        except psutil.Error as exc:
            raise CounterUnavailable(f"process {instance}: {exc}") from exc
    return reader


def _process_cpu_sample(instance):
    times = _process_reader(lambda proc: proc.cpu_times())(instance)
    return CounterSample(_ticks(times.user + times.system), _ticks(time.monotonic()))


def process_category():
    return CounterCategory('Process', [
        # one busy core is 100%, so several busy cores go past 100
        timer('% Processor Time', _process_cpu_sample, clamp=False),
        gauge('Working Set', _process_reader(lambda proc: proc.memory_info().rss)),
        gauge('Virtual Bytes', _process_reader(lambda proc: proc.memory_info().vms)),
        gauge('Thread Count', _process_reader(lambda proc: proc.num_threads())),
        gauge('ID Process', _process_reader(lambda proc: proc.pid)),
    ], _process_instances)


def default_categories():
    return [
        processor_category(),
        memory_category(),
        physical_disk_category(),
        network_interface_category(),
        system_category(),
        process_category(),
    ]


class PsutilCounterRegistry:
    """
    Performance counter registry over psutil.

    Category, counter and instance names match case-insensitively.
    """

    def __init__(self, categories=None):
        if categories is None:
            categories = default_categories()
        self._categories = {category.name.casefold(): category for category in categories}

    def _find_category(self, category):
        return self._categories.get(category.casefold())

    @property
    def category_names(self):
        return [category.name for category in self._categories.values()]

    def category_exists(self, category):
        return self._find_category(category) is not None

    def counter_exists(self, counter, category):
        found = self._find_category(category)
        return found is not None and found.find_counter(counter) is not None

    def instance_exists(self, instance, category):
        found = self._find_category(category)
        return found is not None and found.find_instance(instance) is not None

    def open_counter(self, category, counter, instance=''):
        found = self._find_category(category)
        if found is None:
            raise CategoryNotFoundError(category)
        definition = found.find_counter(counter)
        if definition is None:
            raise CounterNotFoundError(category, counter)
        if instance:
            resolved = found.find_instance(instance)
            if resolved is None:
                raise InstanceNotFoundError(category, counter, instance)
            instance = resolved

        logger.debug("Opening counter %s:%s instance=%r", found.name, definition.name, instance)
        return PerformanceCounter(found.name, definition, instance)
