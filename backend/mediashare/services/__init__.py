# Services package init
"""
MediaShare Backend — Services Layer
=====================================

What:  Business logic and storage adapters between routes (HTTP) and the
       external document database / blob storage.
How:   Adapters implement abstract contracts; services receive adapter
       instances at construction and never build their own clients.

Service Inventory:
    - MetadataStore (abstract): photos / comments / ratings collections
      - CosmosMetadataStore: Azure Cosmos DB
      - SqlMetadataStore: async SQLAlchemy
    - BlobStore (abstract): image bytes → public URL
      - AzureBlobStore: Azure Blob Storage
      - LocalBlobStore: local files served by /api/files
    - shaping: transport-independent input validation
    - PhotoService: upload (blob, then metadata), list, search, detail
    - CommentService: append-only comments
    - RatingService / RatingAggregator: upsert-by-identity ratings, summaries
"""
