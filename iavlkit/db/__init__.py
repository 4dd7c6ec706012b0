"""Key-value stores: the store interface, an in-memory database and prefixed views."""