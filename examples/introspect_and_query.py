from graphql_introspector import GraphQLClient, GraphQLIntrospector, QueryBuilder

# Introspect the schema and write it out as SDL.
introspector = GraphQLIntrospector()
introspector.add("Authorization", "Bearer <TOKEN>").add("User-Agent", "Awesome-Octocat-App")
introspector.get_schema("https://api.github.com/graphql")
introspector.build()
introspector.write("./output.graphql")

# Run an ad-hoc query against the same endpoint.
client = GraphQLClient("https://api.github.com/graphql", timeout=30)
query_builder = (
    QueryBuilder("query($login: String!) { user(login: $login) { name } }")
    .set_variable("login", "octocat")
    .set_headers("Authorization", "Bearer <TOKEN>")
)
data = client.run_query(query_builder)
