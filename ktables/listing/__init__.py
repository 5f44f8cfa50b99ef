"""
The generic listing engine: sortable, filterable, paginated listing
of any resource kind, scoped to what the calling user can see.

The objects are not fetched in full for sorting & paging. Instead,
a server-rendered table of all objects is fetched (only the columns,
no objects), sorted, filtered, and paged in memory by its columns.
Only the objects that survive the paging are then fetched in full.

The two fetches are independent reads of the cluster state, so the objects
can change in between. The inconsistencies are detected and retried.
"""
