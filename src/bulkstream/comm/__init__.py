from .protocols import BulkClient as BulkClient, BulkResult as BulkResult
from .elasticsearch_client import ElasticsearchBulkClient as ElasticsearchBulkClient
from .executor_client import ExecutorBulkClient as ExecutorBulkClient
