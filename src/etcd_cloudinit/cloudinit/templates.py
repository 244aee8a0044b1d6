# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/etcd_cloudinit/cloudinit/templates.py
#
# Jinja sources for the cloud-config blocks. Each sub-template defines one
# macro whose output starts every line with a newline, so a call can be
# appended to the end of the caller's current line ("runcmd:{{- ... }}").

FILES_TEMPLATE = """\
{% macro render_files(files) %}
write_files:
{%- for file in files %}

-   path: {{ file.path }}
{%- if file.encoding %}

    encoding: "{{ file.encoding }}"
{%- endif %}
{%- if file.owner %}

    owner: {{ file.owner }}
{%- endif %}
{%- if file.permissions %}

    permissions: '{{ file.permissions }}'
{%- endif %}

    content: |
{{ indent_block(6, file.content) }}
{%- endfor %}
{% endmacro %}
"""

COMMANDS_TEMPLATE = """\
{% macro render_commands(commands) %}
{% for command in commands %}

  - {{ command | tojson }}
{%- endfor %}
{% endmacro %}
"""

NTP_TEMPLATE = """\
{% macro render_ntp(ntp) %}
{% if ntp %}

ntp:
{%- if ntp.enabled %}

  enabled: true
{%- endif %}

  servers:
{%- for server in ntp.servers %}

    - {{ server }}
{%- endfor %}
{% endif %}
{% endmacro %}
"""

USERS_TEMPLATE = """\
{% macro render_users(users) %}
{% if users %}

users:
{%- for user in users %}

  - name: {{ user.name }}
{%- if user.passwd %}

    passwd: {{ user.passwd }}
{%- endif %}
{%- if user.gecos %}

    gecos: {{ user.gecos }}
{%- endif %}
{%- if user.groups %}

    groups: {{ user.groups }}
{%- endif %}
{%- if user.home_dir %}

    homedir: {{ user.home_dir }}
{%- endif %}
{%- if user.inactive %}

    inactive: true
{%- endif %}
{%- if user.lock_password is not none %}

    lock_passwd: {{ user.lock_password | lower }}
{%- endif %}
{%- if user.shell %}

    shell: {{ user.shell }}
{%- endif %}
{%- if user.primary_group %}

    primary_group: {{ user.primary_group }}
{%- endif %}
{%- if user.sudo %}

    sudo: {{ user.sudo }}
{%- endif %}
{%- if user.ssh_authorized_keys %}

    ssh_authorized_keys:
{%- for key in user.ssh_authorized_keys %}

      - {{ key }}
{%- endfor %}
{%- endif %}
{%- endfor %}
{% endif %}
{% endmacro %}
"""

DISK_SETUP_TEMPLATE = """\
{% macro render_disk_setup(disk_setup) %}
{% if disk_setup and disk_setup.partitions %}

disk_setup:
{%- for partition in disk_setup.partitions %}

  {{ partition.device }}:
{%- if partition.table_type %}

    table_type: {{ partition.table_type }}
{%- endif %}

    layout: {{ partition.layout | lower }}
{%- if partition.overwrite is not none %}

    overwrite: {{ partition.overwrite | lower }}
{%- endif %}
{%- endfor %}
{% endif %}
{% endmacro %}
"""

FS_SETUP_TEMPLATE = """\
{% macro render_fs_setup(disk_setup) %}
{% if disk_setup and disk_setup.filesystems %}

fs_setup:
{%- for fs in disk_setup.filesystems %}

  - label: {{ fs.label }}
    filesystem: {{ fs.filesystem }}
    device: {{ fs.device }}
{%- if fs.partition %}

    partition: {{ fs.partition }}
{%- endif %}
{%- if fs.overwrite is not none %}

    overwrite: {{ fs.overwrite | lower }}
{%- endif %}
{%- if fs.replace_fs %}

    replace_fs: {{ fs.replace_fs }}
{%- endif %}
{%- if fs.extra_opts %}

    extra_opts:
{%- for opt in fs.extra_opts %}

      - {{ opt }}
{%- endfor %}
{%- endif %}
{%- endfor %}
{% endif %}
{% endmacro %}
"""

MOUNTS_TEMPLATE = """\
{% macro render_mounts(mounts) %}
{% if mounts %}

mounts:
{%- for mount in mounts %}

  -
{%- for entry in mount %}

    - {{ entry }}
{%- endfor %}
{%- endfor %}
{% endif %}
{% endmacro %}
"""

# Parse order matters: a syntax error is blamed on the first template that
# fails.
SUB_TEMPLATES = (
    ("files", FILES_TEMPLATE),
    ("commands", COMMANDS_TEMPLATE),
    ("ntp", NTP_TEMPLATE),
    ("users", USERS_TEMPLATE),
    ("disk_setup", DISK_SETUP_TEMPLATE),
    ("fs_setup", FS_SETUP_TEMPLATE),
    ("mounts", MOUNTS_TEMPLATE),
)

_IMPORTS = """\
{% from "files" import render_files %}
{% from "commands" import render_commands %}
{% from "ntp" import render_ntp %}
{% from "users" import render_users %}
{% from "disk_setup" import render_disk_setup %}
{% from "fs_setup" import render_fs_setup %}
{% from "mounts" import render_mounts %}
"""

# cloud-init runs every runcmd item from one shell script, so "|| exit 1"
# stops the post commands and the success sentinel when etcdadm fails. The
# sentinel is always the last runcmd item.
_TRAILING_BLOCKS = """\
{{- render_commands(post_join_commands) }}
  - {{ completion_signal_command | tojson }}
{{- render_ntp(ntp) }}
{{- render_users(users) }}
{{- render_disk_setup(disk_setup) }}
{{- render_fs_setup(disk_setup) }}
{{- render_mounts(mounts) }}
"""

INIT_TEMPLATE = _IMPORTS + """\
{{ header -}}
{{ render_files(write_files) }}
runcmd:
{{- render_commands(pre_join_commands) }}
  - {{ (etcdadm_init_command ~ " || exit 1") | tojson }}
""" + _TRAILING_BLOCKS

JOIN_TEMPLATE = _IMPORTS + """\
{{ header -}}
{{ render_files(write_files) }}
runcmd:
{{- render_commands(pre_join_commands) }}
  - {{ (join_script_path ~ " || exit 1") | tojson }}
""" + _TRAILING_BLOCKS


# The finished document goes through jinja again on the machine, so the script
# body must not contain any jinja delimiters once rendered.
JOIN_SCRIPT_TEMPLATE = """\
#!/bin/bash
# Runs the etcdadm join, retrying transient failures.
set -o nounset
set -o pipefail

log() {
  echo "$(date --rfc-3339=seconds) etcdadm-join: $*"
}

attempt=1
until [ "$attempt" -gt {{ retries }} ]; do
  log "attempt $attempt of {{ retries }}"
  if {{ join_command }}; then
    log "joined etcd cluster"
    exit 0
  fi
  if [ "$attempt" -lt {{ retries }} ]; then
    log "join failed, resetting and retrying in {{ delay }}s"
    etcdadm reset || true
    sleep {{ delay }}
  fi
  attempt=$((attempt + 1))
done

log "join failed after {{ retries }} attempts"
exit 1
"""
