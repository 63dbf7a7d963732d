"""API operation codes combining HTTP methods with resource categories."""