"""GraphQL documents used by the GitHub client."""

CHECK_MILESTONE_QUERY = """
query checkMilestoneExists($owner: String!, $name: String!, $milestone: Int!) {
  repository(owner: $owner, name: $name) {
    milestone(number: $milestone) {
      title
    }
  }
}
"""

# Labels per issue are capped at 20; issues at the caller's count.
MILESTONE_ISSUES_QUERY = """
query milestoneIssues($owner: String!, $name: String!, $milestone: Int!, $first: Int!) {
  repository(owner: $owner, name: $name) {
    milestone(number: $milestone) {
      title
      issues(first: $first, states: OPEN) {
        nodes {
          number
          labels(first: 20) {
            nodes {
              name
            }
          }
        }
      }
    }
  }
}
"""
