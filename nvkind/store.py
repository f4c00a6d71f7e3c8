# /*
# Copyright 2026 The Grove Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# */

"""Cluster config store backed by a ConfigMap inside the cluster itself.

The record lives in the cluster it describes, so it is created after the
cluster and disappears with it. Every read goes to the API server.
"""

from __future__ import annotations

from collections.abc import Callable

import urllib3
from kubernetes import client
from kubernetes import config as k8s_config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed, wait_random

from nvkind import logger
from nvkind.config import ClusterConfig, kube_context_name
from nvkind.constants import (
    CLUSTER_CONFIG_RECORD_KEY,
    CLUSTER_CONFIG_RECORD_NAME,
    DEFAULT_STORE_NAMESPACE,
    DEFAULT_WRITE_ATTEMPTS,
    HTTP_CONFLICT,
    HTTP_NOT_FOUND,
    WRITE_RETRY_JITTER_SECONDS,
    WRITE_RETRY_WAIT_SECONDS,
)
from nvkind.errors import ConfigConflict, ConfigNotFound, InvalidConfig, StoreInconsistent, StoreUnavailable

ApiFactory = Callable[[str], client.CoreV1Api]


class _WriteRaced(Exception):
    """The record existed on create but was gone when read back."""


class ConfigStore:
    """Reads and writes the config record of a cluster.

    Args:
        kubeconfig: Kubeconfig file holding the ``kind-<name>`` contexts.
        namespace: Namespace of the ConfigMap record.
        write_attempts: Maximum attempts for a racing write.
        api_factory: Builds a CoreV1Api for a cluster name; defaults to one
            bound to the cluster's own kube context.
    """

    def __init__(
        self,
        kubeconfig: str,
        namespace: str = DEFAULT_STORE_NAMESPACE,
        write_attempts: int = DEFAULT_WRITE_ATTEMPTS,
        api_factory: ApiFactory | None = None,
    ) -> None:
        self.kubeconfig = kubeconfig
        self.namespace = namespace
        self.write_attempts = write_attempts
        self._api_factory = api_factory or self._default_api

    def _default_api(self, name: str) -> client.CoreV1Api:
        api_client = k8s_config.new_client_from_config(
            config_file=self.kubeconfig, context=kube_context_name(name),
        )
        return client.CoreV1Api(api_client)

    def _api(self, name: str) -> client.CoreV1Api:
        try:
            return self._api_factory(name)
        except (ConfigException, OSError) as err:
            raise StoreUnavailable(
                f"loading client config for context '{kube_context_name(name)}'", str(err),
            ) from err

    def _read_record(self, api: client.CoreV1Api, name: str) -> ClusterConfig:
        try:
            record = api.read_namespaced_config_map(CLUSTER_CONFIG_RECORD_NAME, self.namespace)
        except ApiException as err:
            if err.status == HTTP_NOT_FOUND:
                raise ConfigNotFound(f"no config recorded for cluster '{name}'") from err
            raise StoreUnavailable(f"reading config of cluster '{name}'", f"{err.status} {err.reason}") from err
        except urllib3.exceptions.HTTPError as err:
            raise StoreUnavailable(f"reading config of cluster '{name}'", str(err)) from err

        data = record.data or {}
        if CLUSTER_CONFIG_RECORD_KEY not in data:
            raise ConfigNotFound(
                f"no config recorded for cluster '{name}'",
                f"{CLUSTER_CONFIG_RECORD_NAME} has no '{CLUSTER_CONFIG_RECORD_KEY}' field",
            )
        try:
            return ClusterConfig.from_yaml(data[CLUSTER_CONFIG_RECORD_KEY])
        except InvalidConfig as err:
            raise StoreInconsistent(f"config recorded for cluster '{name}' is unreadable", err.message) from err

    def read(self, name: str) -> ClusterConfig:
        """Fetch and decode the config recorded for cluster *name*.

        Raises:
            ConfigNotFound: If nothing is recorded yet.
            StoreUnavailable: If the API server cannot be reached.
            StoreInconsistent: If the record cannot be decoded.
        """
        return self._read_record(self._api(name), name)

    def write(self, name: str, config: ClusterConfig) -> None:
        """Record *config* for cluster *name*.

        Creation races with other writers are resolved optimistically: if
        the record already holds an equal config the write is a no-op, a
        different config is a conflict, and a record that vanishes between
        the failed create and the read-back is retried.

        Raises:
            ConfigConflict: If a different config is already recorded.
            StoreUnavailable: On API errors or when retries are exhausted.
        """
        api = self._api(name)
        body = client.V1ConfigMap(
            metadata=client.V1ObjectMeta(name=CLUSTER_CONFIG_RECORD_NAME),
            data={CLUSTER_CONFIG_RECORD_KEY: config.to_yaml()},
        )

        @retry(
            stop=stop_after_attempt(self.write_attempts),
            wait=wait_fixed(WRITE_RETRY_WAIT_SECONDS) + wait_random(0, WRITE_RETRY_JITTER_SECONDS),
            retry=retry_if_exception_type(_WriteRaced),
            reraise=True,
        )
        def _attempt() -> None:
            try:
                api.create_namespaced_config_map(self.namespace, body)
                return
            except ApiException as err:
                if err.status != HTTP_CONFLICT:
                    raise StoreUnavailable(
                        f"writing config of cluster '{name}'", f"{err.status} {err.reason}",
                    ) from err
            except urllib3.exceptions.HTTPError as err:
                raise StoreUnavailable(f"writing config of cluster '{name}'", str(err)) from err

            try:
                existing = self._read_record(api, name)
            except ConfigNotFound as err:
                logger.debug("Config record of %s vanished during write, retrying", name)
                raise _WriteRaced(name) from err
            if not existing.matches(config):
                raise ConfigConflict(f"a different config is already recorded for cluster '{name}'")
            logger.debug("Config record of %s already up to date", name)

        try:
            _attempt()
        except _WriteRaced as err:
            raise StoreUnavailable(
                f"writing config of cluster '{name}'",
                f"record kept racing after {self.write_attempts} attempts",
            ) from err
