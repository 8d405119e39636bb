"""Constants for the deployment bucket reconciler."""

# Controller identity used in structured logs and traces
CONTROLLER_NAME = "deployment-bucket"

# Lifecycle hook the reconciler is registered against
HOOK_BEFORE_VALIDATE = "before:aws:common:validate:validate"

# Commands during which live cloud resources must not be touched
PACKAGE_COMMAND = "package"

# Host tool version from which the bucket declaration moved to provider.deploymentBucket
DEPLOYMENT_BUCKET_FIELD_MIN_VERSION = "2.10.0"
CONFIG_PATH_DEPLOYMENT_BUCKET = ("provider", "deploymentBucket")
CONFIG_PATH_DEPLOYMENT_BUCKET_LEGACY = ("provider", "deploymentBucketObject")
CONFIG_PATH_PLUGIN = ("custom", "deploymentBucket")

# S3 status values
STATUS_ENABLED = "Enabled"
STATUS_SUSPENDED = "Suspended"

# Bucket defaults
DEFAULT_REGION = "us-east-1"
DEFAULT_ACL = "private"

# botocore waiter names
WAITER_BUCKET_EXISTS = "bucket_exists"

# Provider error codes that mean "not there" rather than "something broke"
NOT_FOUND_ERROR_CODES = frozenset(
    {
        "404",
        "NotFound",
        "NoSuchBucket",
        "ServerSideEncryptionConfigurationNotFoundError",
    }
)

# Facets
FACET_EXISTENCE = "existence"
FACET_ENCRYPTION = "encryption"
FACET_VERSIONING = "versioning"
FACET_ACCELERATION = "acceleration"
FACET_POLICY = "policy"

# Event reasons
EVENT_REASON_RECONCILE_STARTED = "ReconcileStarted"
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_RECONCILE_SUCCEEDED = "ReconcileSucceeded"
EVENT_REASON_BUCKET_EXISTS = "BucketExists"
EVENT_REASON_BUCKET_CREATED = "BucketCreated"
EVENT_REASON_ENCRYPTION_APPLIED = "EncryptionApplied"
EVENT_REASON_VERSIONING_UPDATED = "VersioningUpdated"
EVENT_REASON_ACCELERATION_UPDATED = "AccelerationUpdated"
EVENT_REASON_POLICY_APPLIED = "PolicyApplied"
EVENT_REASON_WAIT_FAILED = "WaitFailed"

# Error banner printed around a failed reconciliation
ERROR_BANNER = "-------- Deployment Bucket Error --------"
