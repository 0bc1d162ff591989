"""Fixed account names, host aliases and engine defaults."""

DEFAULT_PROPERTIES_FILE = "dbseed.yml"

ADMIN_USERNAME = "admin"
READ_ONLY_ADMIN_USERNAME = "roadmin"
BACKUP_USERNAME = "mysql-backup"

GALERA_AGENT_LINK = "galera-agent"
CLUSTER_HEALTH_LOGGER_LINK = "cluster-health-logger"
# link name -> account it provisions, in render order
KNOWN_LINKS = {
    GALERA_AGENT_LINK: "galera-agent",
    CLUSTER_HEALTH_LOGGER_LINK: "cluster-health-logger",
}

ANY_HOST = "any"
# declared host -> MySQL account host
HOSTS = {
    "localhost": "localhost",
    "127.0.0.1": "127.0.0.1",
    "::1": "::1",
    ANY_HOST: "%",
}
READ_ONLY_ADMIN_HOSTS = ("localhost", "127.0.0.1", "::1")

MYSQL_VERSIONS = ("8.0", "5.7")
DEFAULT_MYSQL_VERSION = "8.0"
DEFAULT_CHARACTER_SET = "utf8mb4"
AUTH_POLICIES = ("mysql_native_password", "caching_sha2_password")
DEFAULT_AUTH_POLICY = "caching_sha2_password"

SCRIPT_HEADER = "-- Generated by dbseed. Do not edit; re-render from the properties file."
