"""
Minimalistic login to the cluster for the library's own principal.

Authentication capabilities are limited to keep the code short & simple:
the service account (when in a pod) and the kubeconfig files (when outside).
No parsing or sophisticated multi-step token retrieval is performed.
"""
import os
from typing import Any, Dict, Optional

import yaml

from ktables.structs import credentials

SA_TOKEN_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/token'
SA_NAMESPACE_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/namespace'
SA_CA_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/ca.crt'


def login() -> credentials.ConnectionInfo:
    """ Use the first available login method, the in-cluster one first. """
    info = login_with_service_account() or login_with_kubeconfig()
    if info is None:
        raise credentials.LoginError("Neither the service account nor the kubeconfig are found.")
    return info


def has_service_account() -> bool:
    return os.path.exists(SA_TOKEN_PATH)


def login_with_service_account() -> Optional[credentials.ConnectionInfo]:
    """
    A minimalistic login handler that can get raw data from a service account.
    """

    # As per https://kubernetes.io/docs/tasks/run-application/access-api-from-pod/
    if not has_service_account():
        return None

    with open(SA_TOKEN_PATH, encoding='utf-8') as f:
        token = f.read().strip()

    namespace: Optional[str] = None
    if os.path.exists(SA_NAMESPACE_PATH):
        with open(SA_NAMESPACE_PATH, encoding='utf-8') as f:
            namespace = f.read().strip()

    return credentials.ConnectionInfo(
        server='https://kubernetes.default.svc',
        ca_path=SA_CA_PATH if os.path.exists(SA_CA_PATH) else None,
        token=token or None,
        default_namespace=namespace or None,
    )


def has_kubeconfig() -> bool:
    env_var_set = bool(os.environ.get('KUBECONFIG'))
    file_exists = os.path.exists(os.path.expanduser('~/.kube/config'))
    return env_var_set or file_exists


def login_with_kubeconfig() -> Optional[credentials.ConnectionInfo]:
    """
    A minimalistic login handler that can get raw data from a kubeconfig file.
    """

    # As per https://kubernetes.io/docs/concepts/configuration/organize-cluster-access-kubeconfig/
    kubeconfig = os.environ.get('KUBECONFIG')
    if not kubeconfig and os.path.exists(os.path.expanduser('~/.kube/config')):
        kubeconfig = '~/.kube/config'
    if not kubeconfig:
        return None

    paths = [path.strip() for path in kubeconfig.split(os.pathsep)]
    paths = [os.path.expanduser(path) for path in paths if path]

    # As prescribed: if the file is absent or non-deserialisable, then fail. The first value wins.
    current_context: Optional[str] = None
    contexts: Dict[Any, Any] = {}
    clusters: Dict[Any, Any] = {}
    users: Dict[Any, Any] = {}
    for path in paths:

        with open(path, encoding='utf-8') as f:
            config = yaml.safe_load(f.read()) or {}

        if current_context is None:
            current_context = config.get('current-context')
        for item in config.get('contexts') or []:
            if item['name'] not in contexts:
                contexts[item['name']] = item.get('context') or {}
        for item in config.get('clusters') or []:
            if item['name'] not in clusters:
                clusters[item['name']] = item.get('cluster') or {}
        for item in config.get('users') or []:
            if item['name'] not in users:
                users[item['name']] = item.get('user') or {}

    # Once fully parsed, use the current context only.
    if current_context is None:
        raise credentials.LoginError('Current context is not set in kubeconfigs.')
    context = contexts[current_context]
    cluster = clusters[context['cluster']]
    user = users[context['user']]

    # Map the retrieved fields into the credentials object.
    return credentials.ConnectionInfo(
        server=cluster.get('server'),
        ca_path=cluster.get('certificate-authority'),
        ca_data=cluster.get('certificate-authority-data'),
        insecure=cluster.get('insecure-skip-tls-verify'),
        certificate_path=user.get('client-certificate'),
        certificate_data=user.get('client-certificate-data'),
        private_key_path=user.get('client-key'),
        private_key_data=user.get('client-key-data'),
        username=user.get('username'),
        password=user.get('password'),
        token=user.get('token'),
        default_namespace=context.get('namespace'),
    )
